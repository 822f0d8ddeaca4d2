"""Hill chart core: curve mapping, label layout, rendering."""

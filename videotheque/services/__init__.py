"""Services applicatifs : classification, extraction, scan, lecture."""

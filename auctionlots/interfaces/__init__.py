"""User-facing interfaces for auctionlots."""

"""Food shelf-life prediction and expiry tracking."""

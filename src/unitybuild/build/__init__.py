"""Settings, naming, project reading and platform build driving."""

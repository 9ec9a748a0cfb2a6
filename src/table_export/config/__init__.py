"""Config – explicit exporter settings, loaders and validation errors."""

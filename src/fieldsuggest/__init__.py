"""fieldsuggest — remote autocomplete and validation for form inputs."""

__version__ = "0.1.0"

"""OpenAPI allOf-to-oneOf polymorphism tooling."""

import logging

logging.getLogger(__name__).addHandler(logging.NullHandler())

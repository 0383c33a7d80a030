"""
Base Model Module.

This module defines the foundational class for all data models within the package.
Descriptors and schemas are Pydantic models so they validate on construction and
serialize to JSON, which is how schemas travel inside the columnar store metadata.
"""

import pydantic


class BaseModel(pydantic.BaseModel):
    """
    The root base class for branch descriptors, field specs, schemas and
    catalog entries. Shared model configuration goes here.
    """

    pass

"""Jobs orchestrating the build of class models.

Copyright (c) 2025 Jim Schilling
This software is released under the MIT License.
"""

from .class_model_job import ClassModelJob

__all__ = ["ClassModelJob"]

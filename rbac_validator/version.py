"""RBAC Validator Meta information."""

__title__ = "azure-rbac-validator"
__description__ = (
    "Point-in-time compliance checks for Azure RBAC role assignments "
    "of service principals."
)
__version__ = "0.3.1"
__author__ = "Jesus Lara"
__author_email__ = "jesuslarag@gmail.com"
__license__ = "MIT"
__copyright__ = "Copyright (c) 2023-2024 Jesus Lara"

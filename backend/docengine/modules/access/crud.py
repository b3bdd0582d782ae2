"""CRUD operations for access grants using FastCRUD."""

from fastcrud import FastCRUD

from .models import AccessGrant

access_grant_crud: FastCRUD = FastCRUD(AccessGrant)

"""Pydantic models for pool requests and pool definitions."""

from eclp.models.pool_definition import CurveParamsDefinition, PoolDefinition
from eclp.models.requests import (
    ExitKind,
    ExitRequest,
    ExitUserData,
    JoinKind,
    JoinRequest,
    JoinUserData,
    SwapKind,
    SwapRequest,
)
from eclp.models.types import Address, Uint256

__all__ = [
    # Types
    "Address",
    "Uint256",
    # Requests
    "SwapKind",
    "SwapRequest",
    "JoinKind",
    "JoinRequest",
    "JoinUserData",
    "ExitKind",
    "ExitRequest",
    "ExitUserData",
    # Pool definitions
    "CurveParamsDefinition",
    "PoolDefinition",
]

"""Application layer - use cases and orchestration."""

from .commands import BuildBaseplateCommand, BuildBinCommand, GenerateBaseplateSetCommand
from .dtos import BaseplateInput, BaseplateSetInput, BaseplateSetOutput, BinInput, ModelOutput

__all__ = [
    "BaseplateInput",
    "BaseplateSetInput",
    "BaseplateSetOutput",
    "BinInput",
    "BuildBaseplateCommand",
    "BuildBinCommand",
    "GenerateBaseplateSetCommand",
    "ModelOutput",
]

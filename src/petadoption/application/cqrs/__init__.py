"""Application CQRS – explicit command handlers."""
from petadoption.application.cqrs.commands import Command, CommandHandler, HandlerRegistry

__all__ = ["Command", "CommandHandler", "HandlerRegistry"]

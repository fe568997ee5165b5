"""Ticket status enumeration."""

from __future__ import annotations

from enum import Enum


class TicketStatus(str, Enum):
    OPEN = "open"
    CLOSED = "closed"

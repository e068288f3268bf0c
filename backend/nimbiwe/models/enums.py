"""Enumerations shared by models and schemas"""
import enum


class Unit(str, enum.Enum):
    kg = "kg"
    piece = "piece"
    basket = "basket"


class EntryStatus(str, enum.Enum):
    pending = "pending"
    validated = "validated"
    rejected = "rejected"


class ValidationDecision(str, enum.Enum):
    validated = "validated"
    rejected = "rejected"


class Role(str, enum.Enum):
    AGENT = "AGENT"
    ADMIN = "ADMIN"

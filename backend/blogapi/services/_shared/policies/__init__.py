"""Stateless business rules shared by services."""

"""Prompt builders for the page update call."""

from __future__ import annotations


def build_system_prompt(brand: str) -> str:
    return (
        f"You are a professional tech journalist writing for {brand}. "
        f"Always use {brand} as the brand name, keep tone premium and engaging."
    )


def build_update_prompt(brand: str) -> str:
    return (
        f"Write a 2-3 paragraph homepage update about recent AI or technology innovation by {brand}. "
        "Return clean HTML paragraphs only (no markdown)."
    )

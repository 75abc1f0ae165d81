"""
A Plus Auto voice agent backend

Answers voice-platform function calls with one speakable sentence,
backed by lookups against the aplusauto.parts WooCommerce store.
"""

__version__ = "1.0.0"

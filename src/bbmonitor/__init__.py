"""Bollinger Band extremes monitor for Bybit USDT perpetuals."""

"""Adapters Django: apps de tickets e diretório, eventos e transações."""

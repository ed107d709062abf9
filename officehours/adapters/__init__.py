"""
Adapters (infraestrutura) da Arquitetura Hexagonal.

Implementam os Ports definidos em officehours.core.
"""

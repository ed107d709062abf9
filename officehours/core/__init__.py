"""
Core Domain Layer - O Hexágono.

Este pacote contém a lógica de negócio pura, sem dependências de frameworks:
- tickets: ciclo de vida dos tickets (criação, claim, release, mark, delete)
- users: resolução de identidade, papéis e projeções de visibilidade

100% testável sem banco de dados, via implementações em memória dos ports.
"""

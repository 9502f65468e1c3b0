"""Tipos del dominio.

Por qué:
- Aquí viven los valores XML-RPC, las llamadas/resultados y los snapshots.
- El dominio no conoce HTTP ni la CLI: solo conceptos del protocolo.
"""

"""Núcleo del cliente: dominio, codec, conexión y fachada tipada.

El codec y la fachada dependen solo del contrato `Transport`; `Server` usa el
adaptador HTTP únicamente como transporte por defecto.
"""

"""Fachada tipada: Download, Tracker, Peer y File sobre la tabla de accessors."""

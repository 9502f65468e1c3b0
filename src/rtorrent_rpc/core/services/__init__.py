"""Servicios sobre `Server`: batches explícitos, multicalls por filas y snapshots."""

"""
Provisión de la base de datos.
Contiene el esquema (schema.sql) y el script que lo aplica y carga datos de ejemplo (seed.py).
"""

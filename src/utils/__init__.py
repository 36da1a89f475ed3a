"""
Utilidades compartidas: formato de textos, interpretación de argumentos y excepciones.
"""

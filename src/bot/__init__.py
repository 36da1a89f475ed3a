"""
Front end de Telegram de FarmaBot.

  handlers.py   → comandos de usuario (/start, /inventario, /pedido, ...)
  moderacion.py → comandos de administradores del grupo
  textos.py     → textos por idioma
  main.py       → arma la Application y la pone a correr
"""

"""
Paquete raíz de FarmaBot.

Estructura interna:
  shared/          → configuración, logger y entidades compartidas
  infrastructure/  → conexiones a servicios externos y repositorios de datos
  services/        → motor de pedidos y ciclo de vencimientos
  scheduler/       → programador periódico dentro del event loop del bot
  bot/             → front end de Telegram
  workers/         → tareas distribuidas de Celery (modo de programación alternativo)
  db/              → esquema y datos de ejemplo
  utils/           → utilidades compartidas (formato, input, excepciones)
"""

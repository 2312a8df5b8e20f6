# 🧩 currency_engine/shared/__init__.py
"""🧩 Спільні інструменти: логування та метрики."""

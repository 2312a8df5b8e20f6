# 🏗️ currency_engine/infrastructure/__init__.py
"""🏗️ Інфраструктурний шар: джерела курсів, кеш, конвертер."""

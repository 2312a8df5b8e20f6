# 🧠 currency_engine/domain/__init__.py
"""🧠 Доменний шар: чисті правила без мережі та стану."""

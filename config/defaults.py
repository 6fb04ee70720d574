"""Built-in pricing corpus and project defaults.

The pricing corpus is the fallback installation price list used when the caller
does not supply one. Prices are unit rates in roubles.
"""

DEFAULT_CURRENCY = "RUB"

DEFAULT_PRICING_BASE = """
Installation of smoke fire detector (point type) - 450 RUB
Installation of manual call point - 350 RUB
Installation of fire alarm control panel (up to 20 loops) - 2500 RUB
Installation of control console (S2000M and equivalents) - 1800 RUB
Installation of backup power supply unit - 1200 RUB
Installation of light/sound annunciator (sign, siren) - 650 RUB
Cable laying (conduit/tray) - 65 RUB/m
Installation of relay module (S2000-SP1 and similar) - 1100 RUB
Junction box wiring - 250 RUB
"""

DEFAULT_CUSTOMER_REQUISITES = (
    "Federal State Budgetary Institution\n"
    "TIN 1234567890\n"
    "Address: 50 Zhigareva St., Tver"
)

DEFAULT_CONTRACTOR_REQUISITES = (
    "SpetsPozhMontazh LLC\n"
    "TIN 0987654321\n"
    "Settlement account 40702810... Sberbank\n"
    "Tel: +7 (999) 000-00-00"
)

DEFAULT_PROJECT_NUMBER = "KP-2023/10-45"

# Fallback when a duration field cannot be parsed
FALLBACK_WORK_DURATION = 30

# Longest accepted duration (about 100 years); larger values fall back
MAX_WORK_DURATION = 36500

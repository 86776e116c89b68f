import os

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# CBC settings for the court layout solver
SOLVER_MSG = os.getenv("PAIRING_SOLVER_MSG", "false").lower() == "true"
SOLVER_TIME_LIMIT = int(os.getenv("PAIRING_SOLVER_TIME_LIMIT", "3"))

DEFAULT_GAME_MODE = os.getenv("PAIRING_DEFAULT_GAME_MODE", "individual")

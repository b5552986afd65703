"""Deployment settings, read from the environment."""
import os
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent

POOL_CONTRACT = "con_happy_token_pool"
QUALIFICATION_CONTRACT = "con_qualification"
LOGIC_CONTRACTS = ["con_happy_token_pool_v1", "con_happy_token_pool_v2"]

OPERATOR = os.environ.get("ITO_OPERATOR", "sys")
CONTRACTS_DIR = Path(os.environ.get("ITO_CONTRACTS_DIR", str(REPO_ROOT)))
IMPLEMENTATION = os.environ.get("ITO_IMPLEMENTATION", "con_happy_token_pool_v2")
LOG_LEVEL = os.environ.get("ITO_LOG_LEVEL", "INFO").upper()

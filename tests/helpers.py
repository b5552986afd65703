import unittest
from contracting.stdlib.bridge.time import Datetime, Timedelta
from contracting.client import ContractingClient
from pathlib import Path

from ito.deploy import deploy, submit_contract
from ito.verification import get_verification, hash_password

REPO_ROOT = Path(__file__).resolve().parent.parent

ETHER = 10 ** 18
DAY = 24 * 60 * 60
PASSWORD = "0x57d0aceec4e308e9af1dd11b09f45bce3fbc92d30ffda7b64f1aaa4005318e92"
BASE_TIME = Datetime(year=2021, month=3, day=29, hour=0, minute=0, second=0)

POOL = "con_happy_token_pool"
V1 = "con_happy_token_pool_v1"
V2 = "con_happy_token_pool_v2"
QUALIFICATION = "con_qualification"
RESERVE = "con_token_a"
EXCHANGE_TOKENS = ["currency", "con_token_b", "con_token_c"]


def at(seconds=0):
    """Block time `seconds` after the pool contract's base time."""
    return BASE_TIME + Timedelta(seconds=seconds)


def events_named(output, name):
    """Events called `name` from a full call output, indexed and plain fields merged."""
    found = []
    for event in output['events']:
        if event['event'] == name:
            data = dict(event.get('data_indexed') or {})
            data.update(event.get('data') or {})
            found.append(data)
    return found


class PoolTestCase(unittest.TestCase):
    implementation = V2 # logic installed at deploy

    def setUp(self):
        self.client = ContractingClient()
        self.client.flush()

        self.operator = 'sys'
        self.alice = 'alice'     # Pool creator
        self.bob = 'bob'         # Swapper
        self.charlie = 'charlie' # Swapper
        self.dave = 'dave'       # Swapper

        self.pool = deploy(self.client, operator=self.operator, contracts_dir=REPO_ROOT,
                           implementation=self.implementation)
        self.qualification = self.client.get_contract(QUALIFICATION)

        for name in [RESERVE] + EXCHANGE_TOKENS:
            submit_contract(self.client, REPO_ROOT / "con_test_token.py", name, self.operator)
        self.reserve = self.client.get_contract(RESERVE)

        # Token Distribution
        self.reserve.transfer(amount=10 ** 8 * ETHER, to=self.alice, signer=self.operator)
        self.reserve.approve(amount=10 ** 30, to=POOL, signer=self.alice)
        for name in EXCHANGE_TOKENS:
            token = self.client.get_contract(name)
            for account in [self.bob, self.charlie, self.dave]:
                token.transfer(amount=10 ** 8 * ETHER, to=account, signer=self.operator)
                token.approve(amount=10 ** 30, to=POOL, signer=account)

    def tearDown(self):
        self.client.flush()

    def fill_pool(self, signer=None, now=None, full_output=False, **overrides):
        params = {
            "password_hash": hash_password(PASSWORD),
            "start_time": 0,
            "end_time": 120 * DAY,
            "message": "Hello From the Outside",
            "exchange_addrs": list(EXCHANGE_TOKENS),
            "ratios": [1, 10000, 1, 2000, 4000, 1],
            "lock_time": 150 * DAY,
            "token_address": RESERVE,
            "total_tokens": 10000 * ETHER,
            "limit": 1000 * ETHER,
            "qualification": QUALIFICATION,
        }
        params.update(overrides)
        return self.pool.fill_pool(
            signer=signer or self.alice,
            environment={"now": now or at(0)},
            return_full_output=full_output,
            **params
        )

    def swap(self, pool_id, signer, exchange_addr_i, input_total, now=None, verification=None, data=None,
             full_output=False):
        return self.pool.swap(
            pool_id=pool_id,
            verification=verification or get_verification(PASSWORD, signer),
            exchange_addr_i=exchange_addr_i,
            input_total=input_total,
            data=data or [],
            signer=signer,
            environment={"now": now or at(DAY)},
            return_full_output=full_output
        )

    def claim(self, pool_ids, signer, now, full_output=False):
        return self.pool.claim(pool_ids=pool_ids, signer=signer, environment={"now": now},
                               return_full_output=full_output)

    def destruct(self, pool_id, now, signer=None, full_output=False):
        return self.pool.destruct(pool_id=pool_id, signer=signer or self.alice, environment={"now": now},
                                  return_full_output=full_output)

    def availability(self, pool_id, account, now=None):
        return self.pool.check_availability(pool_id=pool_id, account=account, environment={"now": now or at(DAY)})

    def balance(self, token_name, account):
        return self.client.get_contract(token_name).balance_of(address=account)

# con_happy_token_pool_v2.py
#
# Pool logic, current version. Stateless: every export receives the stored
# records from con_happy_token_pool, validates the request and returns the
# records to write back together with the transfers the pool must perform.
# Ledger entries are {"slot", "input", "swapped", "claimed"}; entries written
# by v1 have no "claimed" key and are read as unclaimed.
I = importlib

MAX_AMOUNT = 2 ** 128
MAX_TIME_OFFSET = 2 ** 32

# Standard XSC001 (Fungible Token) interface
token_interface = [
    I.Func('transfer_from', args=('amount', 'to', 'main_account')),
    I.Func('transfer', args=('amount', 'to')),
    I.Func('balance_of', args=('address',)),
]

qualification_interface = [
    I.Func('is_qualified', args=('account',)),
    I.Func('log_qualified', args=('account', 'proof')),
]

def to_time(base_time, offset: int):
    assert isinstance(offset, int) and offset >= 0 and offset < MAX_TIME_OFFSET, 'Time offset out of range'
    return base_time + datetime.SECONDS * offset

def copy_pool(pool: dict):
    updated = dict(pool)
    updated['exchanged'] = list(pool['exchanged'])
    return updated

@export
def version():
    return 2

@export
def fill_pool(creator: str, password_hash: str, start_time: int, end_time: int, message: str,
              exchange_addrs: list, ratios: list, lock_time: int, token_address: str,
              total_tokens: int, limit: int, qualification: str, base_time: Any):
    assert start_time < end_time, 'Start time should be earlier than end time.'
    assert limit <= total_tokens, 'Limit needs to be less than or equal to the total supply'
    assert len(ratios) == 2 * len(exchange_addrs), 'Size of ratios = 2 * size of exchange_addrs'
    assert len(exchange_addrs) > 0, 'At least one exchange token is required'
    assert total_tokens > 0 and total_tokens < MAX_AMOUNT, 'total_tokens out of range'
    assert limit >= 0, 'Limit cannot be negative'
    for ratio in ratios:
        assert isinstance(ratio, int) and ratio > 0 and ratio < MAX_AMOUNT, 'Ratios must be positive 128-bit integers'

    assert I.enforce_interface(I.import_module(token_address), token_interface), \
        'token_address contract not XSC001-compliant'
    for exchange_addr in exchange_addrs:
        assert I.enforce_interface(I.import_module(exchange_addr), token_interface), \
            f'exchange token {exchange_addr} not XSC001-compliant'
    assert I.enforce_interface(I.import_module(qualification), qualification_interface), \
        'qualification contract does not implement the oracle interface'

    unlock_time = None
    if lock_time != 0:
        unlock_time = to_time(base_time, lock_time)

    return {
        "creator": creator,
        "password": password_hash[:10], # 40-bit prefix, see swap()
        "start_time": to_time(base_time, start_time),
        "end_time": to_time(base_time, end_time),
        "unlock_time": unlock_time, # None: paid out at swap time
        "message": message,
        "token_address": token_address,
        "total_tokens": total_tokens,
        "remaining": total_tokens,
        "limit": limit,
        "exchange_addrs": exchange_addrs,
        "ratios": ratios,
        "exchanged": [0] * len(exchange_addrs),
        "qualification": qualification,
        "destructed": False
    }

@export
def swap(pool: dict, entry: Any, account: str, verification: str, exchange_addr_i: int,
         input_total: int, data: list):
    assert now >= pool['start_time'], 'Not started.'
    assert now < pool['end_time'], 'Expired.'
    assert verification == hashlib.sha3(pool['password'] + ':' + account), 'Wrong Password'

    qualification = I.import_module(pool['qualification'])
    assert qualification.log_qualified(account=account, proof=data), 'Not Qualified'

    assert entry is None, 'Already swapped'
    assert isinstance(exchange_addr_i, int) and exchange_addr_i >= 0 and \
        exchange_addr_i < len(pool['exchange_addrs']), 'Invalid exchange token index'
    assert isinstance(input_total, int) and input_total < MAX_AMOUNT, "Value doesn't fit in 128 bits"

    ratio_from = pool['ratios'][exchange_addr_i * 2]
    ratio_to = pool['ratios'][exchange_addr_i * 2 + 1]

    # Multiply first, then floor: rounding always favours the pool.
    swapped_tokens = input_total * ratio_to // ratio_from
    assert swapped_tokens < MAX_AMOUNT, "Value doesn't fit in 128 bits"

    actual_output = min(swapped_tokens, pool['remaining'], pool['limit'])
    actual_input = input_total
    if actual_output < swapped_tokens:
        actual_input = actual_output * ratio_from // ratio_to
    assert actual_output > 0, 'Better not draw water with a sieve'

    claimed = pool['unlock_time'] is None

    updated = copy_pool(pool)
    updated['remaining'] = pool['remaining'] - actual_output
    updated['exchanged'][exchange_addr_i] += actual_input

    return {
        "pool": updated,
        "entry": {
            "slot": exchange_addr_i,
            "input": actual_input,
            "swapped": actual_output,
            "claimed": claimed
        },
        "from_address": pool['exchange_addrs'][exchange_addr_i],
        "from_value": actual_input,
        "to_value": actual_output,
        "claimed": claimed
    }

@export
def claim(pool: dict, entry: dict):
    """
    Returns the entry to store and the amount to pay, or None when nothing changes.
    """
    if entry.get('claimed', False):
        return None
    if pool['unlock_time'] is None:
        # Pools without lock pay at swap time; v1 entries only lack the flag.
        updated = dict(entry)
        updated['claimed'] = True
        return {"entry": updated, "amount": 0}
    if now < pool['unlock_time'] or entry['swapped'] <= 0:
        return None

    updated = dict(entry)
    updated['claimed'] = True
    return {"entry": updated, "amount": entry['swapped']}

@export
def destruct(pool: dict, account: str):
    assert account == pool['creator'], 'Only the pool creator can destruct.'
    assert now >= pool['end_time'] or pool['remaining'] == 0, 'Not expired yet'
    if pool['destructed']:
        return None

    updated = copy_pool(pool)
    updated['destructed'] = True
    return {
        "pool": updated,
        "remaining": pool['remaining'],
        "exchanged": list(pool['exchanged'])
    }

@export
def set_unlock_time(pool: dict, account: str, unlock_time: int, base_time: Any):
    assert account == pool['creator'], 'Pool Creator Only'
    assert pool['unlock_time'] is not None, 'Too Late'
    assert unlock_time != 0, 'Cannot set to 0'

    updated = copy_pool(pool)
    updated['unlock_time'] = to_time(base_time, unlock_time)
    return updated

@export
def check_availability(pool: dict, entry: Any):
    swapped = 0
    claimed = False
    if entry is not None:
        swapped = entry['swapped']
        claimed = entry.get('claimed', False)

    unlock_time = pool['unlock_time']
    return {
        "exchange_addrs": pool['exchange_addrs'],
        "remaining": pool['remaining'],
        "started": now >= pool['start_time'],
        "expired": now >= pool['end_time'],
        "unlocked": unlock_time is None or now >= unlock_time,
        "unlock_time": unlock_time,
        "swapped": swapped,
        "exchanged_tokens": pool['exchanged'],
        "claimed": claimed,
        "start_time": pool['start_time'],
        "end_time": pool['end_time'],
        "qualification_addr": pool['qualification'],
        "destructed": pool['destructed']
    }

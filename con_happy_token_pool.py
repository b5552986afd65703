I = importlib

pool_fund = Hash() # pool_id -> Pool Record dict, never deleted
swap_ledger = Hash() # [pool_id, account] -> ledger entry written by the logic that handled the swap
metadata = Hash()
nonce = Variable(default_value=0)

reentrancyGuardActive = Variable(default_value=False)

# Standard XSC001 (Fungible Token) interface
token_interface = [
    I.Func('transfer_from', args=('amount', 'to', 'main_account')),
    I.Func('transfer', args=('amount', 'to')),
    I.Func('balance_of', args=('address',)),
]

# Every logic version has to expose these, in this argument order
logic_interface = [
    I.Func('fill_pool', args=('creator', 'password_hash', 'start_time', 'end_time', 'message',
                              'exchange_addrs', 'ratios', 'lock_time', 'token_address',
                              'total_tokens', 'limit', 'qualification', 'base_time')),
    I.Func('swap', args=('pool', 'entry', 'account', 'verification', 'exchange_addr_i',
                         'input_total', 'data')),
    I.Func('claim', args=('pool', 'entry')),
    I.Func('destruct', args=('pool', 'account')),
    I.Func('set_unlock_time', args=('pool', 'account', 'unlock_time', 'base_time')),
    I.Func('check_availability', args=('pool', 'entry')),
    I.Func('version'),
]

# Events
FillSuccess = LogEvent(
    event="FillSuccess",
    params={
        "id": {'type': str, 'idx': True},
        "creator": {'type': str, 'idx': True},
        "creation_time": {'type': str},
        "token_address": {'type': str, 'idx': True},
        "total": {'type': int},
        "message": {'type': str}
    })

SwapSuccess = LogEvent(
    event="SwapSuccess",
    params={
        "id": {'type': str, 'idx': True},
        "swapper": {'type': str, 'idx': True},
        "from_address": {'type': str},
        "to_address": {'type': str},
        "from_value": {'type': int},
        "to_value": {'type': int},
        "claimed": {'type': bool}
    })

ClaimSuccess = LogEvent(
    event="ClaimSuccess",
    params={
        "id": {'type': str, 'idx': True},
        "claimer": {'type': str, 'idx': True},
        "timestamp": {'type': str},
        "to_value": {'type': int},
        "token_address": {'type': str}
    })

DestructSuccess = LogEvent(
    event="DestructSuccess",
    params={
        "id": {'type': str, 'idx': True},
        "token_address": {'type': str},
        "remaining_balance": {'type': int},
        "exchanged_values": {'type': str}
    })

Upgraded = LogEvent(
    event="Upgraded",
    params={
        "implementation": {'type': str, 'idx': True},
        "previous": {'type': str},
        "version": {'type': int}
    })

@construct
def seed():
    metadata['operator'] = ctx.caller
    metadata['base_time'] = datetime.datetime(year=2021, month=3, day=29) # unix 1616976000
    metadata['message_length'] = 256
    metadata['implementation'] = None # installed by upgrade_to
    metadata['implementation_version'] = 0
    reentrancyGuardActive.set(False)

@export
def change_metadata(key: str, value: Any):
    assert not reentrancyGuardActive.get(), "Pool contract is busy, cannot change metadata now."
    assert ctx.caller == metadata['operator'], 'Only operator can set metadata!'
    assert key not in ('implementation', 'implementation_version'), 'Use upgrade_to to change the implementation'
    metadata[key] = value

@export
def upgrade_to(implementation: str):
    assert not reentrancyGuardActive.get(), "Pool contract is busy, please try again."
    assert ctx.caller == metadata['operator'], 'Only operator can upgrade'
    module = I.import_module(implementation)
    assert I.enforce_interface(module, logic_interface), \
        'implementation does not expose the pool logic interface'

    new_version = module.version()
    # Older logic cannot read what newer logic wrote (v1 has no claimed flag)
    assert isinstance(new_version, int) and new_version > metadata['implementation_version'], \
        'Pool logic can only move to a newer version'

    previous = metadata['implementation']
    metadata['implementation'] = implementation
    metadata['implementation_version'] = new_version

    if previous is None:
        previous = ''
    Upgraded({"implementation": implementation, "previous": previous, "version": new_version})

def logic():
    implementation = metadata['implementation']
    assert implementation is not None, 'Pool logic not installed'
    return I.import_module(implementation)

def receive(token, amount: int, account: str):
    # Pull from account and return what actually arrived
    balance_before = token.balance_of(address=ctx.this)
    token.transfer_from(amount=amount, to=ctx.this, main_account=account)
    return token.balance_of(address=ctx.this) - balance_before

@export
def fill_pool(password_hash: str, start_time: int, end_time: int, message: str, exchange_addrs: list,
              ratios: list, lock_time: int, token_address: str, total_tokens: int, limit: int,
              qualification: str):
    assert not reentrancyGuardActive.get(), "Pool contract is busy, please try again."
    reentrancyGuardActive.set(True)

    assert len(message) <= metadata['message_length'], f"message too long should be <={metadata['message_length']}"

    pool = logic().fill_pool(
        creator=ctx.caller,
        password_hash=password_hash,
        start_time=start_time,
        end_time=end_time,
        message=message,
        exchange_addrs=exchange_addrs,
        ratios=ratios,
        lock_time=lock_time,
        token_address=token_address,
        total_tokens=total_tokens,
        limit=limit,
        qualification=qualification,
        base_time=metadata['base_time']
    )

    pool_nonce = nonce.get()
    nonce.set(pool_nonce + 1)
    pool_id = hashlib.sha3(ctx.caller + ':' + str(now) + ':' + str(pool_nonce) + ':' + token_address)
    assert not pool_fund[pool_id], 'Generated ID not unique.'

    received = receive(I.import_module(token_address), total_tokens, ctx.caller)
    assert received == total_tokens, 'Reserve token delivered less than total_tokens'

    pool_fund[pool_id] = pool

    FillSuccess({
        "id": pool_id,
        "creator": ctx.caller,
        "creation_time": str(now),
        "token_address": token_address,
        "total": total_tokens,
        "message": message
    })

    reentrancyGuardActive.set(False)
    return pool_id

@export
def swap(pool_id: str, verification: str, exchange_addr_i: int, input_total: int, data: list):
    assert not reentrancyGuardActive.get(), "Pool contract is busy, please try again."
    reentrancyGuardActive.set(True)

    pool = pool_fund[pool_id]
    assert pool, 'Pool does not exist'

    result = logic().swap(
        pool=pool,
        entry=swap_ledger[pool_id, ctx.caller],
        account=ctx.caller,
        verification=verification,
        exchange_addr_i=exchange_addr_i,
        input_total=input_total,
        data=data
    )

    # --- EFFECTS (before any token moves) ---
    pool_fund[pool_id] = result['pool']
    swap_ledger[pool_id, ctx.caller] = result['entry']

    # --- INTERACTIONS ---
    # A clamped fill can floor the input to 0; nothing to pull then.
    if result['from_value'] > 0:
        received = receive(I.import_module(result['from_address']), result['from_value'], ctx.caller)
        assert received == result['from_value'], 'Exchange token delivered less than the swap input'

    if result['claimed']:
        I.import_module(pool['token_address']).transfer(amount=result['to_value'], to=ctx.caller)

    SwapSuccess({
        "id": pool_id,
        "swapper": ctx.caller,
        "from_address": result['from_address'],
        "to_address": pool['token_address'],
        "from_value": result['from_value'],
        "to_value": result['to_value'],
        "claimed": result['claimed']
    })
    if result['claimed']:
        ClaimSuccess({
            "id": pool_id,
            "claimer": ctx.caller,
            "timestamp": str(now),
            "to_value": result['to_value'],
            "token_address": pool['token_address']
        })

    reentrancyGuardActive.set(False)

@export
def claim(pool_ids: list):
    assert not reentrancyGuardActive.get(), "Pool contract is busy, please try again."
    reentrancyGuardActive.set(True)

    seen = []
    for pool_id in pool_ids:
        if pool_id in seen:
            continue
        seen.append(pool_id)

        pool = pool_fund[pool_id]
        entry = swap_ledger[pool_id, ctx.caller]
        if not pool or entry is None:
            continue

        result = logic().claim(pool=pool, entry=entry)
        if result is None:
            continue

        swap_ledger[pool_id, ctx.caller] = result['entry']
        if result['amount'] > 0:
            I.import_module(pool['token_address']).transfer(amount=result['amount'], to=ctx.caller)
            ClaimSuccess({
                "id": pool_id,
                "claimer": ctx.caller,
                "timestamp": str(now),
                "to_value": result['amount'],
                "token_address": pool['token_address']
            })

    reentrancyGuardActive.set(False)

@export
def set_unlock_time(pool_id: str, unlock_time: int):
    assert not reentrancyGuardActive.get(), "Pool contract is busy, please try again."
    pool = pool_fund[pool_id]
    assert pool, 'Pool does not exist'

    pool_fund[pool_id] = logic().set_unlock_time(
        pool=pool,
        account=ctx.caller,
        unlock_time=unlock_time,
        base_time=metadata['base_time']
    )

@export
def destruct(pool_id: str):
    assert not reentrancyGuardActive.get(), "Pool contract is busy, please try again."
    reentrancyGuardActive.set(True)

    pool = pool_fund[pool_id]
    assert pool, 'Pool does not exist'

    result = logic().destruct(pool=pool, account=ctx.caller)
    if result is not None:
        pool_fund[pool_id] = result['pool']

        if result['remaining'] > 0:
            I.import_module(pool['token_address']).transfer(amount=result['remaining'], to=pool['creator'])

        exchanged = result['exchanged']
        for i in range(len(exchanged)):
            if exchanged[i] > 0:
                I.import_module(pool['exchange_addrs'][i]).transfer(amount=exchanged[i], to=pool['creator'])

        DestructSuccess({
            "id": pool_id,
            "token_address": pool['token_address'],
            "remaining_balance": result['remaining'],
            "exchanged_values": str(exchanged)
        })

    reentrancyGuardActive.set(False)

@export
def check_availability(pool_id: str, account: str):
    pool = pool_fund[pool_id]
    if not pool:
        return {}
    return logic().check_availability(pool=pool, entry=swap_ledger[pool_id, account])

# --- Helper/View functions ---
@export
def get_pool_info(pool_id: str):
    return pool_fund[pool_id]

@export
def get_swap_info(pool_id: str, account: str):
    return swap_ledger[pool_id, account]

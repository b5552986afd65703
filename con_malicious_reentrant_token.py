# con_malicious_reentrant_token.py
I = importlib

balances = Hash(default_value=0)
metadata = Hash()

re_entry_owner = Variable() # To control sensitive operations

# Re-entry into swap() from transfer_from(), i.e. while the pool pulls this token as exchange asset
re_entry_target_pool_for_swap = Variable()
re_entry_pool_id_for_swap = Variable()
re_entry_verification = Variable()
re_entry_exchange_addr_i = Variable()
re_entry_swap_amount = Variable()

# Re-entry into claim() from transfer(), i.e. while the pool pays this token out as reserve
re_entry_target_pool_for_claim = Variable()
re_entry_pool_id_for_claim = Variable()

re_entry_attempt_count = Variable()
re_entry_max_attempts = Variable() # To prevent infinite loops in complex scenarios

@construct
def seed():
    re_entry_attempt_count.set(0)
    re_entry_max_attempts.set(1) # Only re-enter once for this test
    re_entry_owner.set(ctx.caller)
    metadata['token_name'] = "MALICIOUS TOKEN"
    metadata['token_symbol'] = "EVIL"
    metadata['total_supply'] = 0

@export
def configure_re_entrancy(pool_contract: str, pool_id: str, verification: str, exchange_addr_i: int, amount: int):
    assert ctx.caller == re_entry_owner.get(), "Only owner can configure re-entrancy."
    re_entry_target_pool_for_swap.set(pool_contract)
    re_entry_pool_id_for_swap.set(pool_id)
    re_entry_verification.set(verification)
    re_entry_exchange_addr_i.set(exchange_addr_i)
    re_entry_swap_amount.set(amount)
    re_entry_attempt_count.set(0)

@export
def configure_re_entrancy_for_claim(pool_contract: str, pool_id: str):
    assert ctx.caller == re_entry_owner.get(), "Only owner can configure re-entrancy for claim."
    re_entry_target_pool_for_claim.set(pool_contract)
    re_entry_pool_id_for_claim.set(pool_id)
    re_entry_attempt_count.set(0)

@export
def mint(amount: int, to: str):
    assert ctx.caller == re_entry_owner.get(), "Only owner can mint."
    assert amount > 0, "Mint amount must be positive"
    balances[to] += amount
    metadata['total_supply'] += amount

@export
def transfer(amount: int, to: str):
    assert amount > 0, "Transfer amount must be positive"
    sender = ctx.caller

    sender_bal = balances[sender]
    assert sender_bal >= amount, f"Insufficient balance for sender {sender}"

    balances[sender] = sender_bal - amount
    balances[to] += amount

    # --- RE-ENTRANCY LOGIC FOR CLAIM ---
    target_pool = re_entry_target_pool_for_claim.get()
    current_attempts = re_entry_attempt_count.get()
    if target_pool and sender == target_pool and current_attempts < re_entry_max_attempts.get():
        re_entry_attempt_count.set(current_attempts + 1)
        # ctx.caller of the re-entrant claim is this token contract
        I.import_module(target_pool).claim(pool_ids=[re_entry_pool_id_for_claim.get()])

    return True

@export
def approve(amount: int, to: str):
    assert amount >= 0, "Approve amount must be non-negative"
    balances[ctx.caller, to] = amount
    return True

@export
def transfer_from(amount: int, to: str, main_account: str):
    assert amount > 0, "Transfer amount must be positive"
    spender = ctx.caller

    owner_balance = balances[main_account]
    assert owner_balance >= amount, f"Insufficient balance for owner {main_account}"

    spender_allowance = balances[main_account, spender]
    assert spender_allowance >= amount, f"Insufficient allowance for spender {spender} from owner {main_account}"

    balances[main_account] = owner_balance - amount
    balances[main_account, spender] = spender_allowance - amount
    balances[to] += amount

    # --- RE-ENTRANCY LOGIC FOR SWAP ---
    target_pool = re_entry_target_pool_for_swap.get()
    current_attempts = re_entry_attempt_count.get()
    if target_pool and spender == target_pool and current_attempts < re_entry_max_attempts.get():
        re_entry_attempt_count.set(current_attempts + 1)
        I.import_module(target_pool).swap(
            pool_id=re_entry_pool_id_for_swap.get(),
            verification=re_entry_verification.get(),
            exchange_addr_i=re_entry_exchange_addr_i.get(),
            input_total=re_entry_swap_amount.get(),
            data=[]
        )

    return True

@export
def balance_of(address: str):
    return balances[address]

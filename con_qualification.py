black_list = Hash(default_value=False)
qualified_at = Hash() # account -> Datetime of its first qualifying call
metadata = Hash()

Qualification = LogEvent(
    event="Qualification",
    params={
        "account": {'type': str, 'idx': True},
        "qualified": {'type': bool},
        "timestamp": {'type': str}
    })

@construct
def seed():
    metadata['operator'] = ctx.caller
    metadata['name'] = 'ito default qualification'
    # None keeps qualification open from the start; a Datetime makes it pending until then.
    metadata['start_time'] = None
    metadata['introspection_interface_id'] = hashlib.sha3('supports_interface(interface_id)')[:8]
    metadata['qualification_interface_id'] = hashlib.sha3('is_qualified(account)|log_qualified(account,proof)')[:8]

@export
def change_metadata(key: str, value: Any):
    assert ctx.caller == metadata['operator'], 'Only operator can set metadata!'
    metadata[key] = value

def is_pending():
    start_time = metadata['start_time']
    return start_time is not None and now < start_time

@export
def supports_interface(interface_id: str):
    return interface_id == metadata['introspection_interface_id'] or \
        interface_id == metadata['qualification_interface_id']

@export
def is_qualified(account: str):
    if is_pending() or black_list[account]:
        return False
    return True

@export
def log_qualified(account: str, proof: list):
    # Only the transaction signer can change its own standing; anyone else gets the read-only answer.
    if account != ctx.signer:
        return is_qualified(account=account)

    # Swapping before the start time gets the account black-listed for good.
    if is_pending():
        black_list[account] = True
        return False
    if black_list[account]:
        return False

    if qualified_at[account] is None:
        qualified_at[account] = now
        Qualification({
            "account": account,
            "qualified": True,
            "timestamp": str(now)
        })
    return True

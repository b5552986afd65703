"""
Submit the pool contracts to a contracting client and switch pool logic.

    ito-deploy --operator sys
    ito-deploy --implementation con_happy_token_pool_v1
    ito-deploy --upgrade con_happy_token_pool_v2
"""
import argparse
import logging
from pathlib import Path

from contracting.client import ContractingClient

from ito import settings

log = logging.getLogger(__name__)


def submit_contract(client, filename, name, signer):
    with open(filename) as f:
        code = f.read()
    client.submit(code, name=name, signer=signer)
    log.info(f"Submitted {name} from {filename}")


def deploy(client, operator=None, contracts_dir=None, implementation=None):
    """
    Submit both logic versions, the qualification oracle and the pool.

    The pool is submitted without logic; upgrade_to installs `implementation`
    (the latest version by default) right after submission.
    Returns the pool contract handle.
    """
    operator = operator or settings.OPERATOR
    contracts_dir = Path(contracts_dir or settings.CONTRACTS_DIR)
    implementation = implementation or settings.IMPLEMENTATION

    names = settings.LOGIC_CONTRACTS + [settings.QUALIFICATION_CONTRACT, settings.POOL_CONTRACT]
    for name in names:
        submit_contract(client, contracts_dir / f"{name}.py", name, operator)

    upgrade(client, implementation, operator=operator)
    return client.get_contract(settings.POOL_CONTRACT)


def upgrade(client, implementation, operator=None):
    operator = operator or settings.OPERATOR
    pool = client.get_contract(settings.POOL_CONTRACT)
    previous = pool.metadata['implementation']
    pool.upgrade_to(implementation=implementation, signer=operator)
    log.info(f"Upgraded {settings.POOL_CONTRACT}: {previous} -> {implementation} "
             f"(version {pool.metadata['implementation_version']})")


def main(argv=None):
    parser = argparse.ArgumentParser(description="Deploy the HappyTokenPool contracts")
    parser.add_argument("--operator", default=settings.OPERATOR, help="Signer that owns the pool")
    parser.add_argument("--contracts-dir", default=str(settings.CONTRACTS_DIR),
                        help="Directory holding the contract sources")
    parser.add_argument("--implementation", default=settings.IMPLEMENTATION,
                        help="Logic contract the pool should dispatch to")
    parser.add_argument("--upgrade", metavar="IMPLEMENTATION",
                        help="Only switch an already deployed pool to IMPLEMENTATION")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.LOG_LEVEL, format='%(asctime)s [%(levelname)s] %(message)s')
    if args.debug:
        logging.getLogger().setLevel(logging.DEBUG)

    client = ContractingClient()
    if args.upgrade:
        upgrade(client, args.upgrade, operator=args.operator)
        return 0

    deploy(client, operator=args.operator, contracts_dir=args.contracts_dir,
           implementation=args.implementation)
    log.info(f"Pool logic: {client.get_contract(settings.POOL_CONTRACT).metadata['implementation']}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())

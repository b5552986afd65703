import unittest

from tests.helpers import PoolTestCase, RESERVE, EXCHANGE_TOKENS, QUALIFICATION, V1, V2, ETHER, DAY, at, events_named


class TestPoolEvents(PoolTestCase):
    def test_fill_success(self):
        output = self.fill_pool(full_output=True)
        fills = events_named(output, 'FillSuccess')
        self.assertEqual(len(fills), 1)
        self.assertEqual(fills[0]['id'], output['result'])
        self.assertEqual(fills[0]['creator'], self.alice)
        self.assertEqual(fills[0]['token_address'], RESERVE)
        self.assertEqual(fills[0]['total'], 10000 * ETHER)
        self.assertEqual(fills[0]['message'], "Hello From the Outside")

    def test_swap_in_locked_pool_is_not_claimed(self):
        pool_id = self.fill_pool()
        output = self.swap(pool_id, self.bob, 1, 5 * 10 ** 14, full_output=True)

        swaps = events_named(output, 'SwapSuccess')
        self.assertEqual(len(swaps), 1)
        self.assertEqual(swaps[0]['id'], pool_id)
        self.assertEqual(swaps[0]['swapper'], self.bob)
        self.assertEqual(swaps[0]['from_address'], EXCHANGE_TOKENS[1])
        self.assertEqual(swaps[0]['to_address'], RESERVE)
        self.assertEqual(swaps[0]['from_value'], 5 * 10 ** 14)
        self.assertEqual(swaps[0]['to_value'], ETHER)
        self.assertFalse(swaps[0]['claimed'])
        self.assertEqual(events_named(output, 'ClaimSuccess'), [])

    def test_swap_in_pool_without_lock_is_claimed(self):
        pool_id = self.fill_pool(lock_time=0)
        output = self.swap(pool_id, self.bob, 0, 10 ** 14, full_output=True)

        swaps = events_named(output, 'SwapSuccess')
        self.assertEqual(len(swaps), 1)
        self.assertTrue(swaps[0]['claimed'])

        claims = events_named(output, 'ClaimSuccess')
        self.assertEqual(len(claims), 1)
        self.assertEqual(claims[0]['id'], pool_id)
        self.assertEqual(claims[0]['claimer'], self.bob)
        self.assertEqual(claims[0]['to_value'], ETHER)
        self.assertEqual(claims[0]['token_address'], RESERVE)

    def test_claim_emits_once_per_paid_pool(self):
        print("\n--- Test: one ClaimSuccess per pool actually paid ---")
        first = self.fill_pool()
        second = self.fill_pool()
        late = self.fill_pool(lock_time=300 * DAY)
        skipped = self.fill_pool()
        self.swap(first, self.bob, 0, 10 ** 14)
        self.swap(second, self.bob, 1, 10 ** 15)
        self.swap(late, self.bob, 0, 10 ** 14)

        output = self.claim([first, second, first, late, skipped, 'no-such-pool'], self.bob,
                            at(151 * DAY), full_output=True)
        claims = events_named(output, 'ClaimSuccess')
        self.assertEqual([claim['id'] for claim in claims], [first, second])
        self.assertEqual([claim['to_value'] for claim in claims], [ETHER, 2 * ETHER])
        self.assertEqual(self.balance(RESERVE, self.bob), 3 * ETHER)

        output = self.claim([first, second], self.bob, at(152 * DAY), full_output=True)
        self.assertEqual(events_named(output, 'ClaimSuccess'), [])

    def test_destruct_success(self):
        pool_id = self.fill_pool()
        self.swap(pool_id, self.bob, 0, 10 ** 14)
        self.swap(pool_id, self.charlie, 1, 5 * 10 ** 14)

        output = self.destruct(pool_id, at(121 * DAY), full_output=True)
        destructs = events_named(output, 'DestructSuccess')
        self.assertEqual(len(destructs), 1)
        self.assertEqual(destructs[0]['id'], pool_id)
        self.assertEqual(destructs[0]['token_address'], RESERVE)
        self.assertEqual(destructs[0]['remaining_balance'], 10000 * ETHER - 2 * ETHER)
        self.assertEqual(destructs[0]['exchanged_values'], str([10 ** 14, 5 * 10 ** 14, 0]))

        output = self.destruct(pool_id, at(122 * DAY), full_output=True)
        self.assertEqual(events_named(output, 'DestructSuccess'), [])


class TestQualificationEvents(PoolTestCase):
    def test_qualification_emitted_on_first_swap_only(self):
        first = self.fill_pool()
        second = self.fill_pool()

        output = self.swap(first, self.bob, 0, 10 ** 14, full_output=True)
        qualifications = events_named(output, 'Qualification')
        self.assertEqual(len(qualifications), 1)
        self.assertEqual(qualifications[0]['account'], self.bob)
        self.assertTrue(qualifications[0]['qualified'])
        self.assertEqual(qualifications[0]['timestamp'], str(at(DAY)))

        output = self.swap(second, self.bob, 0, 10 ** 14, now=at(2 * DAY), full_output=True)
        self.assertEqual(events_named(output, 'Qualification'), [])
        self.assertEqual(self.client.get_contract(QUALIFICATION).qualified_at[self.bob], at(DAY))


class TestUpgradeEvents(PoolTestCase):
    implementation = V1

    def test_upgraded(self):
        output = self.pool.upgrade_to(implementation=V2, signer=self.operator, return_full_output=True)
        upgrades = events_named(output, 'Upgraded')
        self.assertEqual(len(upgrades), 1)
        self.assertEqual(upgrades[0]['implementation'], V2)
        self.assertEqual(upgrades[0]['previous'], V1)
        self.assertEqual(upgrades[0]['version'], 2)


if __name__ == '__main__':
    unittest.main()

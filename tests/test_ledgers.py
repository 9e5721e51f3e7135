import pytest

from schemas.sales import CashGroup, LubricantItem, LubricantLedger, PaymentGroup, default_pump_readings
from services import ledgers


class TestPumpLedger:

    def test_petrol1_scenario(self):
        readings = default_pump_readings()
        ledgers.set_pump_field(readings, "petrol1", "opening_reading", "1000.000")
        pump = ledgers.set_pump_field(readings, "petrol1", "closing_reading", "1050.500")

        assert pump.price_per_litre == 101.88
        sales = ledgers.compute_sales(pump)
        assert sales["litres"] == 50.5
        # 50.5 x 101.88
        assert sales["amount"] == 5144.94

    def test_setter_updates_list_in_place(self):
        readings = default_pump_readings()
        ledgers.set_pump_field(readings, "diesel3", "closing_reading", "5123.4")
        assert [p for p in readings if p.pump_id == "diesel3"][0].closing_reading == 5123.4

    def test_closing_below_opening_is_not_clamped(self):
        readings = default_pump_readings()
        ledgers.set_pump_field(readings, "diesel2", "opening_reading", "200")
        pump = ledgers.set_pump_field(readings, "diesel2", "closing_reading", "190")

        assert ledgers.litres_sold(pump) == -10
        assert ledgers.pump_amount(pump) == pytest.approx(-10 * 93.48)

    def test_bad_input_becomes_zero(self):
        readings = default_pump_readings()
        pump = ledgers.set_pump_field(readings, "petrol4", "price_per_litre", "abc")
        assert pump.price_per_litre == 0.0

    def test_unknown_pump_or_field(self):
        readings = default_pump_readings()
        with pytest.raises(ValueError):
            ledgers.set_pump_field(readings, "petrol9", "opening_reading", "1")
        with pytest.raises(ValueError):
            ledgers.set_pump_field(readings, "petrol1", "colour", "1")


class TestLubricantLedger:

    def test_remove_last_item_is_noop(self):
        ledger = LubricantLedger()
        assert ledgers.remove_item(ledger, 0) == ledger
        assert len(ledgers.remove_item(ledger, 0).items) == 1

    def test_add_then_remove_restores_state(self):
        ledger = ledgers.set_item_field(LubricantLedger(), 0, "name", "Engine Oil 1L")
        grown = ledgers.add_item(ledger)

        assert len(grown.items) == 2
        assert grown.items[-1] == LubricantItem()
        assert ledgers.remove_item(grown, 1) == ledger

    def test_remove_out_of_range_is_noop(self):
        grown = ledgers.add_item(LubricantLedger())
        assert ledgers.remove_item(grown, 5) == grown

    def test_item_fields(self):
        ledger = ledgers.set_item_field(LubricantLedger(), 0, "name", "  Gear Oil 500ml ")
        ledger = ledgers.set_item_field(ledger, 0, "count", "3")
        ledger = ledgers.set_item_field(ledger, 0, "unit_price", "45.5")

        item = ledger.items[0]
        assert item.name == "  Gear Oil 500ml "
        assert ledgers.line_amount(item) == 136.5
        assert ledgers.items_total(ledger) == 136.5

    def test_item_field_bad_index(self):
        with pytest.raises(IndexError):
            ledgers.set_item_field(LubricantLedger(), 3, "count", "1")

    def test_total_litres_derives_amount(self):
        ledger = ledgers.set_aggregate_field(LubricantLedger(), "total_litres", "2.5")
        assert ledger.total_litres == 2.5
        assert ledger.total_amount == 825.0

    def test_other_aggregates_are_independent(self):
        ledger = ledgers.set_aggregate_field(LubricantLedger(), "total_litres", "1")
        ledger = ledgers.set_aggregate_field(ledger, "distilled_water", "40")
        ledger = ledgers.set_aggregate_field(ledger, "total_amount", "300")

        assert ledger.total_litres == 1.0
        assert ledger.total_amount == 300.0
        assert ledger.distilled_water == 40.0

    def test_lubricant_total(self):
        ledger = LubricantLedger(
            items=[LubricantItem(count=2, unit_price=150), LubricantItem(count=1, unit_price=99.5)],
            total_amount=330,
            distilled_water=20,
            waste=5,
        )
        assert ledgers.lubricant_total(ledger) == pytest.approx(330 + 20 + 5 + 300 + 99.5)

    def test_empty_item_list_is_refilled(self):
        assert len(LubricantLedger(items=[]).items) == 1


class TestPaymentAndCash:

    def test_cash_group_scenario(self):
        group = CashGroup(rs_500=2, rs_100=3, coins=45.50)
        assert ledgers.cash_group_total(group) == 1345.50

    def test_cash_group_weights_every_denomination(self):
        group = CashGroup(rs_500=1, rs_200=1, rs_100=1, rs_50=1, rs_20=1, rs_10=1, coins=1.5)
        assert ledgers.cash_group_total(group) == 881.5

    def test_payment_group_is_unweighted_sum(self):
        group = PaymentGroup(upi=100, bharat_fleet_card=200, fiserv=50.5, debit=10, ubi=1, evening_locker=2)
        assert ledgers.payment_group_total(group) == pytest.approx(363.5)

    def test_setters_coerce(self):
        cash = ledgers.set_cash_field(CashGroup(), "rs_200", "4 notes")
        cash = ledgers.set_cash_field(cash, "coins", "12.75")
        assert cash.rs_200 == 4
        assert cash.coins == 12.75

        payments = ledgers.set_payment_field(PaymentGroup(), "upi", "")
        assert payments.upi == 0.0

    def test_unknown_fields_rejected(self):
        with pytest.raises(ValueError):
            ledgers.set_cash_field(CashGroup(), "rs_2000", "1")
        with pytest.raises(ValueError):
            ledgers.set_payment_field(PaymentGroup(), "cheque", "1")

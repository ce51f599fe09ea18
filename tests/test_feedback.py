from decimal import Decimal

import pytest

from pizzeria.constant import UNIDENTIFIED_CUSTOMER
from pizzeria.errors import InvalidInputError
from pizzeria.feedback import average_rating, list_ratings, record_rating


class TestRatings:
    def test_record_and_list(self, conn):
        record_rating(conn, "Ana", 5)
        record_rating(conn, None, "3")

        ratings = list_ratings(conn)

        assert [(r.customer_name, r.score) for r in ratings] == [("Ana", 5), (UNIDENTIFIED_CUSTOMER, 3)]
        assert average_rating(ratings) == Decimal("4.00")

    def test_out_of_range_score_is_rejected(self, conn):
        with pytest.raises(InvalidInputError):
            record_rating(conn, "Ana", 0)
        assert list_ratings(conn) == []

    def test_average_of_nothing(self):
        assert average_rating([]) is None

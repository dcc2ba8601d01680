"""
Actionable Insight Generator Tests

Tests every trigger, fixed templates, the one-directive-per-entity rule
and display ordering.
"""

import pytest

from transit_intel.config import InsightConfig
from transit_intel.insights import TEMPLATES, ActionableInsightGenerator, generate_insight_records, generate_insights
from transit_intel.models import (
    InsightTrigger,
    PassengerSnapshot,
    RoutePassengers,
    StationPassengers,
    WeatherSnapshot,
)


def with_waiting(route, counts):
    """Copy of a route with new waiting counts per stop"""
    stops = [stop.model_copy(update={'passenger_count': count}) for stop, count in zip(route.stops, counts)]
    return route.model_copy(update={'stops': stops})


def keys(insights):
    return [(i.trigger, i.entity_id) for i in insights]


@pytest.fixture
def busy_network(route_42, make_route, make_segment, make_vehicle, make_incident):
    """Two routes that fire one of each route/segment/vehicle trigger"""
    routes = [
        with_waiting(route_42.model_copy(update={'average_delay': 9.0}), [0, 30, 0, 0]),
        make_route('15', name="Kamothe Line"),
    ]
    vehicles = [
        make_vehicle('42-vehicle-0', passengers=45, fuel_level=10.0),
        make_vehicle('42-vehicle-1', status='out-of-service', passengers=0, speed=0.0),
        make_vehicle('42-vehicle-2', status='out-of-service', passengers=0, speed=0.0),
        make_vehicle('15-vehicle-0', route_id='15', passengers=5),
    ]
    segments = [
        make_segment('42', 0, congestion=0.85, name="Sion-Panvel Highway",
                     incidents=[make_incident('accident', 'high')]),
        make_segment('42', 1, congestion=0.6, name="Palm Beach Road",
                     incidents=[make_incident('weather', 'medium', 'incident-2')]),
        make_segment('15', 0, congestion=0.2, name="Kamothe Link Road"),
    ]
    return vehicles, segments, routes


# ============================================
# Contract Tests
# ============================================

class TestGenerateInsights:
    """Tests for the generate_insights operation"""

    def test_empty_input(self):
        """Test no data gives no directives"""
        assert generate_insights([], [], []) == []

    def test_full_scenario(self, busy_network):
        """Test every trigger fires once, in display order"""
        vehicles, segments, routes = busy_network

        insights = generate_insight_records(vehicles, segments, routes)

        assert keys(insights) == [
            (InsightTrigger.INCIDENT_DIVERSION, '42-segment-0'),
            (InsightTrigger.OUT_OF_SERVICE_VEHICLES, '42'),
            (InsightTrigger.STATION_DEMAND, '42-stop-1'),
            (InsightTrigger.OVERCROWDED_ROUTE, '42'),
            (InsightTrigger.SEGMENT_CONGESTION, '42-segment-0'),
            (InsightTrigger.SEGMENT_WEATHER, '42-segment-1'),
            (InsightTrigger.ROUTE_DELAY, '42'),
            (InsightTrigger.LOW_FUEL, '42-vehicle-0'),
            (InsightTrigger.LOW_DEMAND_ROUTE, '15'),
        ]

    def test_messages_match_records(self, busy_network):
        """Test the string variant returns the record messages"""
        vehicles, segments, routes = busy_network

        messages = generate_insights(vehicles, segments, routes)
        records = generate_insight_records(vehicles, segments, routes)

        assert messages == [r.message for r in records]
        assert all(isinstance(m, str) and m for m in messages)

    def test_no_duplicate_trigger_entity_pairs(self, busy_network):
        """Test at most one directive per (trigger, entity)"""
        vehicles, segments, routes = busy_network

        insights = generate_insight_records(vehicles + vehicles, segments + segments, routes + routes)

        assert len(keys(insights)) == len(set(keys(insights)))
        assert len(insights) == 9

    def test_trigger_set_is_stable(self, busy_network):
        """Test identical input yields the same directives"""
        vehicles, segments, routes = busy_network

        first = generate_insight_records(vehicles, segments, routes)
        second = generate_insight_records(vehicles, segments, routes)

        assert keys(first) == keys(second)
        assert [i.message for i in first] == [i.message for i in second]

    def test_does_not_mutate_input(self, busy_network):
        """Test inputs are unchanged after two calls"""
        vehicles, segments, routes = busy_network
        before = [m.model_dump() for m in vehicles + segments + routes]

        generate_insights(vehicles, segments, routes)
        generate_insights(vehicles, segments, routes)

        assert [m.model_dump() for m in vehicles + segments + routes] == before

    def test_ordered_by_trigger(self, busy_network):
        """Test directives are grouped in trigger order"""
        vehicles, segments, routes = busy_network
        order = list(InsightTrigger)

        triggers = [i.trigger for i in generate_insight_records(vehicles, segments, routes)]

        assert triggers == sorted(triggers, key=order.index)


# ============================================
# Template Tests
# ============================================

class TestTemplates:
    """Tests that templates are fixed and only names vary"""

    def test_every_trigger_has_a_template(self):
        """Test the template table covers all triggers"""
        assert set(TEMPLATES) == set(InsightTrigger)

    def test_segment_congestion_message(self, make_segment):
        """Test the congestion directive names the segment"""
        segment = make_segment('42', 0, congestion=0.85, name="Sion-Panvel Highway")

        assert generate_insights([], [segment], []) == [
            "Reduce speed on Sion-Panvel Highway due to heavy congestion."
        ]

    def test_same_template_different_entities(self, make_segment):
        """Test two segments share the template with their own names"""
        segments = [
            make_segment('42', 0, congestion=0.9, name="Sion-Panvel Highway"),
            make_segment('15', 0, congestion=0.8, name="Kamothe Link Road"),
        ]

        messages = generate_insights([], segments, [])

        assert messages == [
            TEMPLATES[InsightTrigger.SEGMENT_CONGESTION].format(segment="Sion-Panvel Highway"),
            TEMPLATES[InsightTrigger.SEGMENT_CONGESTION].format(segment="Kamothe Link Road"),
        ]


# ============================================
# Trigger Tests
# ============================================

class TestTriggers:
    """Tests for individual trigger conditions"""

    def test_out_of_service_threshold(self, route_42, make_vehicle):
        """Test one out-of-service vehicle is tolerated, two are not"""
        one = [make_vehicle('v1', status='out-of-service')]
        two = one + [make_vehicle('v2', status='out-of-service')]

        assert generate_insights(one, [], [route_42]) == []
        assert generate_insights(two, [], [route_42]) == [
            "Dispatch replacement vehicles to Panvel Station Express to cover out-of-service buses."
        ]

    def test_out_of_service_unknown_route(self, make_vehicle):
        """Test vehicles on an unknown route use a generic route name"""
        vehicles = [make_vehicle(f"99-vehicle-{i}", route_id='99', status='out-of-service') for i in range(3)]

        assert generate_insights(vehicles, [], []) == [
            "Dispatch replacement vehicles to Route 99 to cover out-of-service buses."
        ]

    def test_station_demand_exceeds_headroom(self, route_42, make_vehicle):
        """Test waiting passengers beyond the stop's share of free seats"""
        route = with_waiting(route_42, [0, 30, 0, 0])
        vehicles = [make_vehicle(passengers=45)]

        records = generate_insight_records(vehicles, [], [route])
        demand = [r for r in records if r.trigger == InsightTrigger.STATION_DEMAND]

        assert [r.entity_id for r in demand] == ['42-stop-1']
        assert demand[0].message == (
            "Dispatch an additional vehicle to Kharghar on Panvel Station Express due to high waiting demand."
        )

    def test_station_demand_within_headroom(self, route_42, make_vehicle):
        """Test enough free seats suppress the directive"""
        route = with_waiting(route_42, [5, 10, 5, 0])
        vehicles = [make_vehicle('v1', passengers=5), make_vehicle('v2', passengers=5)]

        assert generate_insights(vehicles, [], [route]) == []

    def test_station_demand_from_passenger_snapshot(self, route_42, make_vehicle):
        """Test reported station waiting counts override the route record"""
        route = with_waiting(route_42, [0, 30, 0, 0])
        passengers = PassengerSnapshot(by_station=[
            StationPassengers(station_id='42-stop-1', waiting_passengers=0),
            StationPassengers(station_id='Belapur', waiting_passengers=25),
        ])

        records = generate_insight_records([make_vehicle(passengers=20)], [], [route], passengers=passengers)

        assert [r.entity_id for r in records if r.trigger == InsightTrigger.STATION_DEMAND] == ['42-stop-2']

    def test_station_demand_needs_tracked_vehicles(self, route_42):
        """Test a route with no vehicle data raises no dispatch directives"""
        route = with_waiting(route_42, [0, 3, 0, 0])

        records = generate_insight_records([], [], [route])

        assert InsightTrigger.STATION_DEMAND not in {r.trigger for r in records}

    def test_station_demand_with_fleet_out_of_service(self, route_42, make_vehicle):
        """Test a tracked route with no in-service vehicles has no free seats"""
        route = with_waiting(route_42, [0, 3, 0, 0])
        vehicles = [make_vehicle(status='out-of-service', passengers=0, speed=0.0)]

        records = generate_insight_records(vehicles, [], [route])

        assert [r.entity_id for r in records if r.trigger == InsightTrigger.STATION_DEMAND] == ['42-stop-1']

    def test_segment_congestion_threshold(self, make_segment):
        """Test congestion must exceed 0.7"""
        assert generate_insights([], [make_segment(congestion=0.7)], []) == []
        assert len(generate_insights([], [make_segment(congestion=0.71)], [])) == 1

    def test_segment_weather(self, make_segment, make_incident):
        """Test a weather incident asks drivers to slow down"""
        segment = make_segment(congestion=0.5, name="Palm Beach Road",
                               incidents=[make_incident('weather', 'low')])

        assert generate_insights([], [segment], []) == [
            "Reduce speed on Palm Beach Road due to adverse weather."
        ]

    @pytest.mark.parametrize("incident_type", ["accident", "construction", "event"])
    def test_incident_diversion(self, make_segment, make_incident, incident_type):
        """Test high-severity blocking incidents divert traffic"""
        segment = make_segment(congestion=0.5, name="Sion-Panvel Highway",
                               incidents=[make_incident(incident_type, 'high')])

        assert generate_insights([], [segment], []) == [
            "Divert vehicles away from Sion-Panvel Highway until the incident is cleared."
        ]

    def test_minor_incident_no_diversion(self, make_segment, make_incident):
        """Test low-severity incidents do not divert"""
        segment = make_segment(congestion=0.5, incidents=[make_incident('accident', 'low')])

        assert generate_insights([], [segment], []) == []

    def test_route_delay(self, make_route):
        """Test chronic delay adjusts the timetable"""
        routes = [make_route('15', name="Kamothe Line", average_delay=6.0), make_route('7', average_delay=5.0)]

        assert generate_insights([], [], routes) == [
            "Adjust the timetable on Kamothe Line to absorb recurring delays."
        ]

    def test_low_fuel(self, make_vehicle):
        """Test vehicles below the fuel threshold are sent to refuel"""
        vehicles = [
            make_vehicle('42-vehicle-0', fuel_level=9.5),
            make_vehicle('42-vehicle-1', fuel_level=40.0),
            make_vehicle('42-vehicle-2'),
        ]

        assert generate_insights(vehicles, [], []) == [
            "Send vehicle 42-vehicle-0 for refuelling at the end of its current trip."
        ]

    def test_overcrowded_route(self, make_route, make_vehicle):
        """Test high average occupancy increases frequency"""
        routes = [make_route('15', name="Kamothe Line")]
        vehicles = [
            make_vehicle('15-vehicle-0', route_id='15', passengers=48),
            make_vehicle('15-vehicle-1', route_id='15', passengers=45),
            make_vehicle('15-vehicle-2', route_id='15', status='out-of-service', passengers=0),
        ]

        records = generate_insight_records(vehicles, [], routes)

        assert (InsightTrigger.OVERCROWDED_ROUTE, '15') in keys(records)

    def test_overcrowded_route_from_passenger_snapshot(self, make_route):
        """Test reported route occupancy is used when no vehicles are tracked"""
        routes = [make_route('15', name="Kamothe Line"), make_route('7', name="Kharghar Loop")]
        passengers = PassengerSnapshot(by_route=[
            RoutePassengers(route_id='15', passengers=45, capacity=50, occupancy_rate=0.9),
            RoutePassengers(route_id='7', passengers=47, capacity=50),
        ])

        records = generate_insight_records([], [], routes, passengers=passengers)

        assert keys(records) == [
            (InsightTrigger.OVERCROWDED_ROUTE, '15'),
            (InsightTrigger.OVERCROWDED_ROUTE, '7'),
        ]

    def test_vehicle_occupancy_preferred_over_snapshot(self, make_route, make_vehicle):
        """Test in-service vehicles outrank the reported route occupancy"""
        routes = [make_route('15', name="Kamothe Line")]
        passengers = PassengerSnapshot(by_route=[
            RoutePassengers(route_id='15', passengers=48, capacity=50, occupancy_rate=0.96),
        ])
        vehicles = [make_vehicle('15-vehicle-0', route_id='15', passengers=20)]

        records = generate_insight_records(vehicles, [], routes, passengers=passengers)

        assert (InsightTrigger.OVERCROWDED_ROUTE, '15') not in keys(records)

    def test_low_demand_route(self, make_route, make_segment, make_vehicle):
        """Test light traffic and empty vehicles reduce service"""
        routes = [make_route('15', name="Kamothe Line")]
        vehicles = [make_vehicle('15-vehicle-0', route_id='15', passengers=5)]

        assert generate_insights(vehicles, [make_segment('15', 0, congestion=0.2)], routes) == [
            "Reduce service on Kamothe Line during the current low-demand period."
        ]
        # No traffic data, no service reduction
        assert generate_insights(vehicles, [], routes) == []

    def test_citywide_weather(self):
        """Test adverse weather produces a network-wide advisory"""
        adverse = WeatherSnapshot(location="Navi Mumbai", condition='rain', impact='high')
        mild = WeatherSnapshot(location="Navi Mumbai", condition='cloudy', impact='low')

        assert generate_insights([], [], [], weather=adverse) == [
            "Advise all drivers near Navi Mumbai to reduce speed due to adverse weather."
        ]
        assert generate_insights([], [], [], weather=mild) == []

    def test_custom_thresholds(self, make_segment):
        """Test thresholds come from the config"""
        config = InsightConfig(high_congestion_threshold=0.5)

        assert len(ActionableInsightGenerator(config=config).generate([], [make_segment(congestion=0.6)], [])) == 1

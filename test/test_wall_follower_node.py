import math

import pytest

rclpy = pytest.importorskip('rclpy')

from nav_msgs.msg import Odometry  # noqa: E402
from sensor_msgs.msg import LaserScan  # noqa: E402

from wall_follower.wall_follower_node import WallFollowerNode  # noqa: E402


@pytest.fixture
def node():
    rclpy.init()
    node = WallFollowerNode()
    published = []
    node.cmd_vel_pub.publish = published.append
    node.published = published
    try:
        yield node
    finally:
        node.destroy_node()
        rclpy.shutdown()


def make_scan(value=1.0, n=360, range_max=3.5):
    msg = LaserScan()
    msg.angle_min = 0.0
    msg.angle_increment = 2 * math.pi / n
    msg.range_max = range_max
    msg.ranges = [value] * n
    return msg


def make_odom(x, y):
    msg = Odometry()
    msg.pose.pose.position.x = x
    msg.pose.pose.position.y = y
    msg.pose.pose.orientation.w = 1.0
    return msg


def test_default_parameters(node):
    assert node.update_period == pytest.approx(0.1)
    assert node.driver.modulator.base_factor == pytest.approx(0.8)
    assert node.driver.tracker.threshold == pytest.approx(0.2)
    assert node.driver.aggregator.beam_width_deg == 10


def test_no_command_until_scan(node):
    node.update_callback()
    assert node.published == []

    node.scan_callback(make_scan(1.0))
    node.update_callback()
    assert len(node.published) == 1
    twist = node.published[0]
    assert twist.linear.x == pytest.approx(0.2)
    assert twist.angular.z == pytest.approx(1.5)


def test_short_scan_is_dropped(node):
    node.scan_callback(make_scan(1.0, n=100))
    node.update_callback()
    assert node.published == []


def test_lap_completion_stops_robot(node):
    node.scan_callback(make_scan(1.0))
    for x, y in [(0.0, 0.0), (1.0, 1.0), (0.05, 0.05)]:
        node.odom_callback(make_odom(x, y))
    node.update_callback()
    twist = node.published[-1]
    assert twist.linear.x == 0.0
    assert twist.angular.z == 0.0


def test_shutdown_publishes_stop(node):
    node.scan_callback(make_scan(1.0))
    node.update_callback()
    assert node.published[-1].angular.z != 0.0

    node.stop_robot()
    twist = node.published[-1]
    assert twist.linear.x == 0.0
    assert twist.angular.z == 0.0


def test_main_sends_stop_after_interrupt(monkeypatch):
    from wall_follower import wall_follower_node

    published = []

    def interrupted_spin(node):
        node.cmd_vel_pub.publish = published.append
        raise KeyboardInterrupt

    monkeypatch.setattr(wall_follower_node.rclpy, 'spin', interrupted_spin)
    wall_follower_node.main(args=[])

    assert len(published) == 1
    assert published[0].linear.x == 0.0
    assert published[0].angular.z == 0.0
    assert not rclpy.ok()

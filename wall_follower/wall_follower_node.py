#!/usr/bin/env python3
"""
Wall Follower Node for TurtleBot3

Follows the wall on the robot's left using twelve LiDAR sector clearances
and a fixed rule ladder, slows down when scans stop arriving, and stops
once odometry shows the robot has completed a lap back to its start.
"""

import rclpy
from rclpy.node import Node
from rclpy.qos import QoSProfile, ReliabilityPolicy, HistoryPolicy, DurabilityPolicy
from rclpy.signals import SignalHandlerOptions
from geometry_msgs.msg import Twist
from nav_msgs.msg import Odometry
from sensor_msgs.msg import LaserScan

from .driver import ControlLoopDriver
from .policy import DecisionPolicy
from .sectors import InputError, Sector, SectorAggregator
from .staleness import StalenessModulator
from .start_tracker import StartProximityTracker


class WallFollowerNode(Node):
    """
    ROS 2 node wrapping ControlLoopDriver.

    Subscribes to:
        scan (LaserScan): Raw laser scan from the LiDAR
        odom (Odometry): Wheel odometry, used for lap detection

    Publishes:
        cmd_vel (Twist): Velocity command, once per update period after the
            first scan has arrived
    """

    def __init__(self):
        super().__init__('wall_follower_node')

        # Configuration parameters
        self.declare_parameter('update_period', 0.1)  # seconds
        self.declare_parameter('beam_width_deg', SectorAggregator.BEAM_WIDTH_DEG)
        self.declare_parameter('num_sectors', SectorAggregator.NUM_SECTORS)
        self.declare_parameter('base_factor', StalenessModulator.BASE_FACTOR)
        self.declare_parameter('start_range', StartProximityTracker.START_RANGE)  # meters
        self.declare_parameter('rearm_at_arrival', True)
        self.declare_parameter('left_front_open', DecisionPolicy.LEFT_FRONT_OPEN)
        self.declare_parameter('front_blocked', DecisionPolicy.FRONT_BLOCKED)
        self.declare_parameter('front_left_near', DecisionPolicy.FRONT_LEFT_NEAR)
        self.declare_parameter('front_right_near', DecisionPolicy.FRONT_RIGHT_NEAR)
        self.declare_parameter('left_front_drift', DecisionPolicy.LEFT_FRONT_DRIFT)
        self.declare_parameter('linear_velocity', DecisionPolicy.LINEAR_VELOCITY)
        self.declare_parameter('turn_linear_velocity', DecisionPolicy.TURN_LINEAR_VELOCITY)
        self.declare_parameter('angular_velocity', DecisionPolicy.ANGULAR_VELOCITY)
        self.declare_parameter('scan_topic', 'scan')
        self.declare_parameter('odom_topic', 'odom')
        self.declare_parameter('cmd_vel_topic', 'cmd_vel')

        self.update_period = float(self.get_parameter('update_period').value)
        scan_topic = self.get_parameter('scan_topic').value
        odom_topic = self.get_parameter('odom_topic').value
        cmd_vel_topic = self.get_parameter('cmd_vel_topic').value

        policy = DecisionPolicy(
            left_front_open=float(self.get_parameter('left_front_open').value),
            front_blocked=float(self.get_parameter('front_blocked').value),
            front_left_near=float(self.get_parameter('front_left_near').value),
            front_right_near=float(self.get_parameter('front_right_near').value),
            left_front_drift=float(self.get_parameter('left_front_drift').value),
            linear_velocity=float(self.get_parameter('linear_velocity').value),
            turn_linear_velocity=float(self.get_parameter('turn_linear_velocity').value),
            angular_velocity=float(self.get_parameter('angular_velocity').value),
        )

        self.driver = ControlLoopDriver(
            self.update_cmd_vel,
            aggregator=SectorAggregator(
                beam_width_deg=int(self.get_parameter('beam_width_deg').value),
                num_sectors=int(self.get_parameter('num_sectors').value),
            ),
            tracker=StartProximityTracker(
                threshold=float(self.get_parameter('start_range').value),
                rearm_at_arrival=bool(self.get_parameter('rearm_at_arrival').value),
            ),
            modulator=StalenessModulator(float(self.get_parameter('base_factor').value)),
            policy=policy,
        )

        # QoS profile for sensor data
        sensor_qos = QoSProfile(
            reliability=ReliabilityPolicy.BEST_EFFORT,
            durability=DurabilityPolicy.VOLATILE,
            history=HistoryPolicy.KEEP_LAST,
            depth=10
        )

        self.cmd_vel_pub = self.create_publisher(Twist, cmd_vel_topic, 10)

        self.scan_sub = self.create_subscription(
            LaserScan,
            scan_topic,
            self.scan_callback,
            sensor_qos
        )
        self.odom_sub = self.create_subscription(
            Odometry,
            odom_topic,
            self.odom_callback,
            10
        )

        self.update_timer = self.create_timer(self.update_period, self.update_callback)

        self.get_logger().info('Wall follower node has been initialised')

    # ========================================================================
    # CALLBACKS
    # ========================================================================

    def odom_callback(self, msg: Odometry):
        """Track yaw and feed the position to the lap detector."""
        q = msg.pose.pose.orientation
        pose, arrived = self.driver.on_pose(
            msg.pose.pose.position.x,
            msg.pose.pose.position.y,
            (q.x, q.y, q.z, q.w)
        )

        if arrived:
            self.get_logger().info(
                f'Near start!! Lap {self.driver.laps} complete at ({pose.x:.3f}, {pose.y:.3f})'
            )

        self.get_logger().debug(
            f'Position (x: {pose.x:.3f}, y: {pose.y:.3f}), Orientation (yaw: {pose.yaw:.3f})',
            throttle_duration_sec=1.0
        )

    def scan_callback(self, msg: LaserScan):
        """Reduce the scan to sector clearances; bad scans are dropped."""
        try:
            clearances = self.driver.on_scan(msg.ranges, msg.range_max)
        except InputError as e:
            self.get_logger().warn(f'Rejected scan: {e}', throttle_duration_sec=5.0)
            return

        self.get_logger().debug(
            f'Closest distance in front: {clearances[Sector.FRONT]:.3f}',
            throttle_duration_sec=1.0
        )

    def update_callback(self):
        result = self.driver.tick()
        if result is None:
            return

        self.get_logger().info(
            f'{result.rule.description}. Linear: {result.command.linear:.2f}, '
            f'Angular: {result.command.angular:.2f} (factor {result.factor:.2f})',
            throttle_duration_sec=0.5
        )

    def update_cmd_vel(self, linear: float, angular: float):
        """Publish a velocity command."""
        cmd_vel = Twist()
        cmd_vel.linear.x = float(linear)
        cmd_vel.angular.z = float(angular)
        self.cmd_vel_pub.publish(cmd_vel)

    def stop_robot(self):
        """Send a zero command; called once on the way out."""
        self.driver.stop()
        self.get_logger().info('Wall follower node has been terminated')


def main(args=None):
    """
    Main entry point for the wall follower.

    SIGINT is left to Python so the context is still up when the final
    stop command is published; rclpy is shut down after it.
    """
    rclpy.init(args=args, signal_handler_options=SignalHandlerOptions.NO)
    node = WallFollowerNode()

    try:
        rclpy.spin(node)
    except KeyboardInterrupt:
        pass
    finally:
        if rclpy.ok():
            node.stop_robot()
        node.destroy_node()
        if rclpy.ok():
            rclpy.shutdown()


if __name__ == '__main__':
    main()

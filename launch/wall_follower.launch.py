#!/usr/bin/env python3

from launch import LaunchDescription
from launch_ros.actions import Node
from launch.actions import DeclareLaunchArgument
from launch.substitutions import LaunchConfiguration, PathJoinSubstitution
from launch_ros.substitutions import FindPackageShare


def generate_launch_description():
    # Default parameter file shipped with the package
    default_params_file = PathJoinSubstitution([
        FindPackageShare('wall_follower'),
        'config',
        'wall_follower.yaml'
    ])

    params_file_arg = DeclareLaunchArgument(
        'params_file',
        default_value=default_params_file,
        description='YAML file with wall follower parameters'
    )

    return LaunchDescription([
        params_file_arg,

        # Wall follower node - left-hand wall following with lap detection
        # Subscribes to: /scan, /odom
        # Publishes to: /cmd_vel
        Node(
            package='wall_follower',
            executable='wall_follower',
            name='wall_follower',
            output='screen',
            parameters=[LaunchConfiguration('params_file')],
        ),
    ])

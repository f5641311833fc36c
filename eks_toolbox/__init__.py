"""eks-toolbox — install the AWS CLI, eksctl and kubectl on a Linux host."""

__version__ = "0.1.0"

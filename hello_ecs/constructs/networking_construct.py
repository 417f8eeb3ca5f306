"""Configure the networking components."""

from aws_cdk import aws_ec2 as ec2
from constructs import Construct


class NetworkingConstruct(Construct):
    """VPC with hand-placed public and private subnets."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        region: str,
        availability_zones: list[str] = None,
        nat_gateway: bool = True,
        **kwargs,
    ) -> None:
        """NetworkingConstruct constructor.

        Parameters
        ----------
        scope : Construct
            Parent construct.
        construct_id : str
            A unique string identifier for this construct.
        region : str
            Region the subnets are placed in, e.g. "ap-northeast-1".
        availability_zones : list[str], optional
            Two availability zone suffixes, defaults to ["a", "c"].
            The load balancer requires public subnets in two zones.
        nat_gateway : bool
            Whether to give the private subnet outbound access through
            a NAT gateway.
        kwargs : dict
            Keyword arguments

        """
        super().__init__(scope, construct_id, **kwargs)

        if availability_zones is None:
            availability_zones = ["a", "c"]
        if len(availability_zones) != 2:
            raise ValueError(
                "Exactly two availability zones are required, "
                f"got: {list(availability_zones)}"
            )
        zones = [f"{region}{suffix}" for suffix in availability_zones]

        # Subnets are declared by hand below, so the VPC gets none of its own.
        self.vpc = ec2.Vpc(
            self,
            "Vpc",
            ip_addresses=ec2.IpAddresses.cidr("192.168.0.0/16"),
            subnet_configuration=[],
        )

        self.igw = ec2.CfnInternetGateway(self, "InternetGateway")
        igw_attachment = ec2.CfnVPCGatewayAttachment(
            self,
            "InternetGatewayAttachment",
            internet_gateway_id=self.igw.ref,
            vpc_id=self.vpc.vpc_id,
        )

        self.public_subnets = [
            ec2.PublicSubnet(
                self,
                f"PublicSubnet{zone[-2:]}",
                vpc_id=self.vpc.vpc_id,
                availability_zone=zone,
                cidr_block=f"192.168.{index}.0/24",
                map_public_ip_on_launch=True,
            )
            for index, zone in enumerate(zones)
        ]
        for subnet in self.public_subnets:
            subnet.add_default_internet_route(self.igw.ref, igw_attachment)

        self.private_subnets = [
            ec2.PrivateSubnet(
                self,
                f"PrivateSubnet{zones[0][-2:]}",
                vpc_id=self.vpc.vpc_id,
                availability_zone=zones[0],
                cidr_block="192.168.10.0/24",
            )
        ]

        self.nat_gateway = None
        if nat_gateway:
            self.add_nat_gateway()

    def add_nat_gateway(self):
        """Route the private subnets through a NAT gateway."""
        eip = ec2.CfnEIP(self, "NatGatewayEip")
        self.nat_gateway = ec2.CfnNatGateway(
            self,
            "NatGateway",
            allocation_id=eip.attr_allocation_id,
            subnet_id=self.public_subnets[0].subnet_id,
        )
        for subnet in self.private_subnets:
            subnet.add_default_nat_route(self.nat_gateway.ref)

    @property
    def load_balancer_subnets(self) -> ec2.SubnetSelection:
        """Subnets the internet-facing load balancer is placed in."""
        return ec2.SubnetSelection(subnets=self.public_subnets)

    @property
    def compute_subnets(self) -> ec2.SubnetSelection:
        """Subnets the containers run in.

        Without a NAT gateway the private subnet has no way to pull
        images, so compute falls back to the public subnets.
        """
        if self.nat_gateway is not None:
            return ec2.SubnetSelection(subnets=self.private_subnets)
        return ec2.SubnetSelection(subnets=self.public_subnets)

"""Configure the load balanced hello world container service.

The service sits behind an internet-facing Application Load Balancer.
Only the load balancer is reachable from the internet; the containers
accept traffic from the load balancer security group alone.

https://docs.aws.amazon.com/AmazonECS/latest/bestpracticesguide/networking-inbound.html
"""

from aws_cdk import CfnOutput
from aws_cdk import aws_autoscaling as autoscaling
from aws_cdk import aws_ec2 as ec2
from aws_cdk import aws_ecs as ecs
from aws_cdk import aws_elasticloadbalancingv2 as elbv2
from constructs import Construct

from hello_ecs.constructs.networking_construct import NetworkingConstruct

# Port the responder listens on inside the container
CONTAINER_PORT = 80
# Port the load balancer listens on
LISTENER_PORT = 80
CAPACITY_TYPES = ("FARGATE", "EC2")


class HelloService(Construct):
    """An ECS service answering HTTP requests behind a load balancer."""

    def __init__(
        self,
        scope: Construct,
        construct_id: str,
        networking: NetworkingConstruct,
        image: ecs.ContainerImage,
        envname: str,
        capacity: str = "FARGATE",
        **kwargs,
    ) -> None:
        """Construct the hello world service.

        Parameters
        ----------
        scope : Construct
            Parent construct.
        construct_id : str
            A unique string identifier for this construct.
        networking : NetworkingConstruct
            VPC and subnets into which to put the resources.
        image : ecs.ContainerImage
            Image of the responder container.
        envname : str
            Environment name, used as a prefix for named resources.
        capacity : str
            Either "FARGATE" or "EC2" (container instances managed by
            an auto-scaling group).
        kwargs : dict
            Keyword arguments

        """
        super().__init__(scope, construct_id, **kwargs)

        capacity = capacity.upper()
        if capacity not in CAPACITY_TYPES:
            raise ValueError(
                f"Unknown capacity type: [{capacity}], "
                f"expected one of {list(CAPACITY_TYPES)}"
            )

        self.networking = networking
        self.vpc = networking.vpc
        self.image = image
        self.envname = envname
        self.capacity = capacity

        # Security group in which the load balancer will reside
        self.create_load_balancer_security_group()
        # Security group in which containers will reside
        self.create_ecs_security_group()
        self.add_security_group_rules()

        # ECS cluster, task definition and service
        if capacity == "EC2":
            self.add_ec2_compute_resources()
        else:
            self.add_fargate_compute_resources()

        self.add_load_balancer()

    def create_load_balancer_security_group(self):
        """Create a security group for the load balancer."""
        # Outbound traffic is limited to the containers by the rules below.
        self.load_balancer_security_group = ec2.SecurityGroup(
            self,
            "AlbSecurityGroup",
            vpc=self.vpc,
            description="Security group for the hello world ALB",
            allow_all_outbound=False,
        )

    def create_ecs_security_group(self):
        """Create a security group for containers."""
        # Outbound traffic is needed to pull the container image.
        self.ecs_security_group = ec2.SecurityGroup(
            self,
            "EcsSecurityGroup",
            vpc=self.vpc,
            description="Security group for the hello world containers",
            allow_all_outbound=True,
        )

    def add_security_group_rules(self):
        """Allow HTTP from the internet to the ALB and from the ALB to ECS."""
        self.load_balancer_security_group.add_ingress_rule(
            peer=ec2.Peer.any_ipv4(),
            connection=ec2.Port.tcp(LISTENER_PORT),
            description="allow http",
        )
        self.load_balancer_security_group.add_egress_rule(
            peer=self.ecs_security_group,
            connection=ec2.Port.tcp(CONTAINER_PORT),
            description="allow http",
        )
        self.ecs_security_group.add_ingress_rule(
            peer=self.load_balancer_security_group,
            connection=ec2.Port.tcp(CONTAINER_PORT),
            description="allow http",
        )

    def add_container(self, task_definition: ecs.TaskDefinition, **kwargs):
        """Add the responder container to a task definition."""
        # Logging is configured to use AWS CloudWatch Logs.
        return task_definition.add_container(
            "DefaultContainer",
            container_name="hello-world",
            image=self.image,
            port_mappings=[
                ecs.PortMapping(
                    name="http-port",
                    container_port=CONTAINER_PORT,
                    app_protocol=ecs.AppProtocol.http,
                )
            ],
            logging=ecs.LogDrivers.aws_logs(stream_prefix="HelloWorld"),
            **kwargs,
        )

    def add_fargate_compute_resources(self):
        """Add a Fargate task definition and service."""
        self.ecs_cluster = ecs.Cluster(self, "EcsCluster", vpc=self.vpc)

        task_definition = ecs.FargateTaskDefinition(
            self,
            "TaskDef",
            runtime_platform=ecs.RuntimePlatform(
                cpu_architecture=ecs.CpuArchitecture.X86_64,
                operating_system_family=ecs.OperatingSystemFamily.LINUX,
            ),
            # Allowable values:
            # https://docs.aws.amazon.com/cdk/api/v2/docs/
            # aws-cdk-lib.aws_ecs.TaskDefinition.html#cpu
            cpu=1024,
            memory_limit_mib=4096,
        )
        self.add_container(task_definition)

        # Without a NAT gateway the tasks run in the public subnets and
        # need their own address to reach the image registry.
        self.ecs_service = ecs.FargateService(
            self,
            "Service",
            cluster=self.ecs_cluster,
            task_definition=task_definition,
            desired_count=1,
            min_healthy_percent=100,
            max_healthy_percent=200,
            assign_public_ip=self.networking.nat_gateway is None,
            vpc_subnets=self.networking.compute_subnets,
            security_groups=[self.ecs_security_group],
        )

    def add_ec2_compute_resources(self):
        """Add container instances, an EC2 task definition and service."""
        # ECS Cluster manages EC2 instances on which containers are deployed.
        self.ecs_cluster = ecs.Cluster(self, "EcsCluster", vpc=self.vpc)

        # This auto-scaling group is used to manage the
        # number of instances in the ECS cluster. If an instance
        # becomes unhealthy, the auto-scaling group will replace it.
        auto_scaling_group = autoscaling.AutoScalingGroup(
            self,
            "AutoScalingGroup",
            instance_type=ec2.InstanceType.of(
                ec2.InstanceClass.BURSTABLE3, ec2.InstanceSize.MICRO
            ),
            machine_image=ecs.EcsOptimizedImage.amazon_linux2(),
            vpc=self.vpc,
            # Without a NAT gateway these are the public subnets, which hand
            # out public addresses on launch. associate_public_ip_address is
            # rejected for subnets the Vpc construct does not list as public.
            vpc_subnets=self.networking.compute_subnets,
            desired_capacity=1,
            min_capacity=1,
            max_capacity=2,  # Allow one extra instance during updates
        )

        # integrates ECS with EC2 Auto Scaling Groups
        # to manage the scaling and provisioning of the underlying
        # EC2 instances based on the requirements of ECS tasks
        capacity_provider = ecs.AsgCapacityProvider(
            self,
            "AsgCapacityProvider",
            auto_scaling_group=auto_scaling_group,
            enable_managed_termination_protection=False,
        )
        self.ecs_cluster.add_asg_capacity_provider(capacity_provider)

        # AWS_VPC mode gives each task its own network interface, so it
        # can be registered as an IP target of the load balancer.
        task_definition = ecs.Ec2TaskDefinition(
            self,
            "TaskDef",
            network_mode=ecs.NetworkMode.AWS_VPC,
        )
        self.add_container(task_definition, memory_limit_mib=512, cpu=256)

        self.ecs_service = ecs.Ec2Service(
            self,
            "Service",
            cluster=self.ecs_cluster,
            task_definition=task_definition,
            desired_count=1,
            min_healthy_percent=100,
            max_healthy_percent=200,
            vpc_subnets=self.networking.compute_subnets,
            security_groups=[self.ecs_security_group],
            capacity_provider_strategies=[
                ecs.CapacityProviderStrategy(
                    capacity_provider=capacity_provider.capacity_provider_name,
                    weight=1,
                )
            ],
        )

    def add_load_balancer(self):
        """Add an internet-facing load balancer in front of the service."""
        self.load_balancer = elbv2.ApplicationLoadBalancer(
            self,
            "Alb",
            load_balancer_name=f"{self.envname}-alb",
            vpc=self.vpc,
            internet_facing=True,
            vpc_subnets=self.networking.load_balancer_subnets,
            security_group=self.load_balancer_security_group,
        )

        self.target_group = elbv2.ApplicationTargetGroup(
            self,
            "TargetGroup",
            vpc=self.vpc,
            port=CONTAINER_PORT,
            protocol=elbv2.ApplicationProtocol.HTTP,
            targets=[self.ecs_service],
        )

        # The ingress rule is already declared on the security group.
        listener = self.load_balancer.add_listener(
            "Listener", port=LISTENER_PORT, open=False
        )
        listener.add_target_groups("TargetGroup", target_groups=[self.target_group])

        # This simply prints the DNS name of the
        # load balancer in the terminal.
        CfnOutput(
            self,
            "LoadBalancerDNS",
            value=f"http://{self.load_balancer.load_balancer_dns_name}",
        )

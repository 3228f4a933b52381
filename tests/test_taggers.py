"""
Tests for per-kind tag application
"""
import json
from unittest.mock import MagicMock

import boto3
import pytest
from moto import mock_aws

from aws_tag_sweeper.context import RunContext
from aws_tag_sweeper.exceptions import TaggingError
from aws_tag_sweeper.models import ResourceKind
from aws_tag_sweeper.tagging import ResourceTagger, to_tag_list

from conftest import make_record

TAGS = {'Owner': 'platform', 'Environment': 'Production'}

ASSUME_ROLE_POLICY = json.dumps({
    'Version': '2012-10-17',
    'Statement': [{
        'Effect': 'Allow',
        'Principal': {'Service': 'ec2.amazonaws.com'},
        'Action': 'sts:AssumeRole'
    }]
})


@pytest.fixture
def context():
    context = MagicMock()
    context.home_region = 'us-east-1'
    return context


@pytest.fixture
def tagger(context):
    return ResourceTagger(context)


def test_to_tag_list():
    assert to_tag_list({'a': '1'}) == [{'Key': 'a', 'Value': '1'}]
    assert to_tag_list({'a': '1'}, key_field='key', value_field='value') == [{'key': 'a', 'value': '1'}]


@pytest.mark.parametrize('kind', [
    ResourceKind.EC2_INSTANCE,
    ResourceKind.SECURITY_GROUP,
    ResourceKind.SUBNET,
    ResourceKind.VPC,
])
def test_ec2_kinds_use_create_tags(context, tagger, kind):
    record = make_record('arn:aws:ec2:eu-west-1:1:x/abc', kind, locality='eu-west-1', short_id='abc')

    tagger.apply_tags(record, TAGS)

    context.client.assert_called_with('ec2', 'eu-west-1')
    context.client.return_value.create_tags.assert_called_once_with(
        Resources=['abc'], Tags=to_tag_list(TAGS)
    )


def test_iam_role_is_tagged_by_name(context, tagger):
    record = make_record('arn:aws:iam::1:role/deployer', ResourceKind.IAM_ROLE, locality='global',
                         short_id='deployer')

    tagger.apply_tags(record, TAGS)

    context.client.assert_called_with('iam')
    context.client.return_value.tag_role.assert_called_once_with(RoleName='deployer', Tags=to_tag_list(TAGS))


def test_iam_policy_is_tagged_by_arn(context, tagger):
    arn = 'arn:aws:iam::1:policy/read-only'
    record = make_record(arn, ResourceKind.IAM_POLICY, locality='global', short_id='read-only')

    tagger.apply_tags(record, TAGS)

    context.client.return_value.tag_policy.assert_called_once_with(PolicyArn=arn, Tags=to_tag_list(TAGS))


def test_s3_bucket_goes_to_bucket_region(context, tagger):
    record = make_record('arn:aws:s3:::logs', ResourceKind.S3_BUCKET, locality='eu-west-1', short_id='logs')

    tagger.apply_tags(record, TAGS)

    context.client.assert_called_with('s3', 'eu-west-1')
    context.client.return_value.put_bucket_tagging.assert_called_once_with(
        Bucket='logs', Tagging={'TagSet': to_tag_list(TAGS)}
    )


def test_lambda_and_eks_take_mappings(context, tagger):
    function = make_record('arn:aws:lambda:r:1:function:f', ResourceKind.LAMBDA_FUNCTION, short_id='f')
    cluster = make_record('arn:aws:eks:r:1:cluster/c', ResourceKind.EKS_CLUSTER, short_id='c')

    tagger.apply_tags(function, TAGS)
    tagger.apply_tags(cluster, TAGS)

    client = context.client.return_value
    client.tag_resource.assert_any_call(Resource=function.identity, Tags=TAGS)
    client.tag_resource.assert_any_call(resourceArn=cluster.identity, tags=TAGS)


def test_lightsail_uses_lower_case_pairs(context, tagger):
    record = make_record('arn:aws:lightsail:us-east-1:1:Disk/x', ResourceKind.LIGHTSAIL_DISK, short_id='data-disk')

    tagger.apply_tags(record, {'Owner': 'web'})

    context.client.return_value.tag_resource.assert_called_once_with(
        resourceName='data-disk',
        resourceArn=record.identity,
        tags=[{'key': 'Owner', 'value': 'web'}]
    )


def test_rds_and_sns_use_arns(context, tagger):
    db = make_record('arn:aws:rds:r:1:db:orders', ResourceKind.RDS_INSTANCE, short_id='orders')
    topic = make_record('arn:aws:sns:r:1:alerts', ResourceKind.SNS_TOPIC)

    tagger.apply_tags(db, TAGS)
    tagger.apply_tags(topic, TAGS)

    client = context.client.return_value
    client.add_tags_to_resource.assert_called_once_with(ResourceName=db.identity, Tags=to_tag_list(TAGS))
    client.tag_resource.assert_called_once_with(ResourceArn=topic.identity, Tags=to_tag_list(TAGS))


def test_generic_records_use_tagging_api(context, tagger):
    record = make_record('arn:aws:dynamodb:ap-south-1:1:table/orders', locality='ap-south-1')
    context.client.return_value.tag_resources.return_value = {'FailedResourcesMap': {}}

    tagger.apply_tags(record, TAGS)

    context.client.assert_called_with('resourcegroupstaggingapi', 'ap-south-1')
    context.client.return_value.tag_resources.assert_called_once_with(
        ResourceARNList=[record.identity], Tags=TAGS
    )


def test_tagging_api_rejection_raises(context, tagger):
    record = make_record('arn:aws:dynamodb:r:1:table/orders')
    context.client.return_value.tag_resources.return_value = {
        'FailedResourcesMap': {
            record.identity: {'StatusCode': 400, 'ErrorCode': 'InvalidParameterException',
                              'ErrorMessage': 'Too many tags'}
        }
    }

    with pytest.raises(TaggingError, match='Too many tags'):
        tagger.apply_tags(record, TAGS)


def test_missing_short_id_raises(context, tagger):
    record = make_record('arn:aws:ec2:r:1:instance/i-1', ResourceKind.EC2_INSTANCE)

    with pytest.raises(TaggingError):
        tagger.apply_tags(record, TAGS)

    context.client.return_value.create_tags.assert_not_called()


def test_provider_errors_propagate(context, tagger):
    record = make_record('arn:aws:iam::1:user/alice', ResourceKind.IAM_USER, short_id='alice')
    context.client.return_value.tag_user.side_effect = RuntimeError('throttled')

    with pytest.raises(RuntimeError):
        tagger.apply_tags(record, TAGS)


@mock_aws
def test_ec2_tags_land_on_the_resource():
    ec2 = boto3.client('ec2', region_name='us-west-2')
    vpc_id = ec2.create_vpc(CidrBlock='10.1.0.0/16')['Vpc']['VpcId']
    record = make_record(f'arn:aws:ec2:us-west-2:123456789012:vpc/{vpc_id}', ResourceKind.VPC,
                         locality='us-west-2', short_id=vpc_id)

    ResourceTagger(RunContext('us-east-1')).apply_tags(record, TAGS)

    vpc = ec2.describe_vpcs(VpcIds=[vpc_id])['Vpcs'][0]
    assert {t['Key']: t['Value'] for t in vpc['Tags']} == TAGS


@mock_aws
def test_iam_role_tags_land_on_the_role():
    iam = boto3.client('iam', region_name='us-east-1')
    role_arn = iam.create_role(RoleName='app', AssumeRolePolicyDocument=ASSUME_ROLE_POLICY)['Role']['Arn']
    record = make_record(role_arn, ResourceKind.IAM_ROLE, locality='global', short_id='app')

    ResourceTagger(RunContext('us-east-1')).apply_tags(record, {'Owner': 'ops'})

    tags = iam.list_role_tags(RoleName='app')['Tags']
    assert tags == [{'Key': 'Owner', 'Value': 'ops'}]

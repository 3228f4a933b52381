from setuptools import setup, find_packages

with open("README.md", "r", encoding="utf-8") as fh:
    long_description = fh.read()

setup(
    name="aws-tag-sweeper",
    version="0.1.0",
    author="Your Organization",
    author_email="aws-tag-sweeper@your-org.com",
    description="Discover AWS resources across all regions and apply a standard tag set",
    long_description=long_description,
    long_description_content_type="text/markdown",
    url="https://github.com/your-org/aws-tag-sweeper",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: System Administrators",
        "Topic :: System :: Systems Administration",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    python_requires=">=3.8",
    install_requires=[
        "boto3>=1.26.0",
        "botocore>=1.29.0",
        "tenacity>=8.2.0",
        "pyyaml>=6.0",
        "click>=8.1.0",
        "colorlog>=6.7.0",
        "tabulate>=0.9.0",
    ],
    extras_require={
        "dev": [
            "moto>=5.0.0",
            "pytest>=7.2.0",
            "pytest-cov>=4.0.0",
        ]
    },
    entry_points={
        "console_scripts": [
            "aws-tag-sweeper=aws_tag_sweeper.cli:cli",
        ],
    },
)

"""
Tenant Identity
多租户身份数据模型库：客户、组织、应用、用户、角色与凭据
"""

from setuptools import setup, find_packages
import os

# 读取 README 文件
def read_readme():
    readme_path = os.path.join(os.path.dirname(__file__), 'README.md')
    if os.path.exists(readme_path):
        with open(readme_path, 'r', encoding='utf-8') as f:
            return f.read()
    return "Tenant Identity - 多租户身份数据模型库"

setup(
    name="tenant-identity",
    version="1.0.0",
    author="Tenant Identity Team",
    description="多租户身份数据模型库 - 客户、组织、应用、用户、角色与凭据",
    long_description=read_readme(),
    long_description_content_type="text/markdown",
    packages=find_packages(include=["tenant_identity", "tenant_identity.*"]),
    include_package_data=True,
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Web Environment",
        "Framework :: Django",
        "Framework :: Django :: 4.2",
        "Framework :: Django :: 5.0",
        "Framework :: Django :: 5.1",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: System :: Systems Administration :: Authentication/Directory",
        "Topic :: Software Development :: Libraries :: Python Modules",
    ],
    keywords="django multi-tenant identity client organization application roles credentials",
    python_requires=">=3.10",
    install_requires=[
        "Django>=4.2,<6.0",
        "djangorestframework>=3.14.0",
        "python-decouple>=3.8",
        "psycopg2-binary>=2.9.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-django>=4.5.0",
            "pytest-cov>=4.1.0",
            "black>=23.3.0",
            "flake8>=6.0.0",
            "isort>=5.12.0",
        ],
        "test": [
            "pytest>=7.4.0",
            "pytest-django>=4.5.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "tenant-identity=tenant_identity.cli:main",
        ],
    },
    zip_safe=False,
    platforms=["any"],
    license="MIT",
)

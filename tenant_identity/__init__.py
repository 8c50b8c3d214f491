"""
Tenant Identity

多租户身份数据模型库：客户(租户)拥有组织和应用，应用拥有用户、角色和凭据。

核心设计原则：
- 所有实体对外只暴露UUID，不暴露内部自增ID
- 软删除：不物理删除任何记录
- 明文密码只出现在传输对象中，数据库只保存哈希
"""

__version__ = "1.0.0"
__author__ = "Tenant Identity Team"
__description__ = "多租户身份数据模型库"

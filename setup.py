"""Setup script for the SF3 animation codec package."""

from setuptools import setup, find_packages

package_name = 'sf3anim'


setup(
    name=package_name,
    version='0.3.0',
    packages=find_packages(exclude=['test']),
    package_data={
        'sf3anim.config': ['*.yaml'],
    },
    install_requires=[
        'setuptools',
        'numpy>=1.21.0',
        'pyyaml>=6.0',
    ],
    extras_require={
        'dev': [
            'pytest>=7.0.0',
            'pytest-cov>=4.0.0',
            'black>=23.0.0',
            'isort>=5.12.0',
            'mypy>=1.0.0',
            'flake8>=6.0.0',
        ],
    },
    zip_safe=True,
    maintainer='sf3anim contributors',
    maintainer_email='maintainer@example.com',
    description='Binary codec for SF3 skeletal animation files',
    license='MIT',
    tests_require=['pytest'],
    entry_points={
        'console_scripts': [
            'sf3anim = sf3anim.cli:main',
        ],
    },
    python_requires='>=3.8',
)

from setuptools import setup, find_packages

__version__ = '0.1.0'

requirements = [
    'coloredlogs',
    'h5py',
]

setup(
    name='nftregistry',
    version=__version__,
    description='Ledger of non-fungible tokens with owners, approvals and operators.',
    packages=find_packages(include=['nftregistry', 'nftregistry.*']),
    install_requires=requirements,
    extras_require={
        'test': ['pytest'],
    },
    classifiers=[
        'Programming Language :: Python :: 3',
    ],
    python_requires='>=3.8',
    zip_safe=True,
    include_package_data=True,
)

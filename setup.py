from setuptools import find_packages, setup

setup(
    name='circuitgraph',
    version='0.1.0',
    packages=find_packages('src'),
    package_dir={'': 'src'},
    license='BSD',
    description='circuitgraph builds arithmetic computation graphs with hint nodes, propagates values through them, '
                'and checks equality constraints.',
    python_requires='>=3.10',
    classifiers=[
        'Development Status :: 4 - Beta',
        'Intended Audience :: Developers',
        'Topic :: Software Development :: Libraries',
        'License :: OSI Approved :: BSD License',
        'Programming Language :: Python :: 3.10',
        'Programming Language :: Python :: 3.11',
        'Programming Language :: Python :: 3.12'
    ],
    install_requires=['networkx', 'numpy', 'pandas', 'pydotplus'],
    extras_require={
        'test': ['pytest'],
    },
)

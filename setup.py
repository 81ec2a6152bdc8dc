from setuptools import setup;

version = '0.9';

setup(
    name             = 'dz-oracle-pdbsize'
   ,version          = version
   ,url              = 'https://github.com/pauldzy/dz-oracle-pdbsize'
   ,author_email     = 'paul@dziemiela.com'
   ,license          = 'CC0 1.0 Universal public domain dedication'
   ,packages         = ['dz_oracle_pdbsize']
   ,package_dir      = {'':'src'}
   ,python_requires  = '>=3.8'
   ,install_requires = [
       'oracledb'
    ]
   ,extras_require   = {
       'test': ['pytest']
    }
   ,entry_points     = {
       'console_scripts': [
          'dz-oracle-pdbsize = dz_oracle_pdbsize.cli:main'
       ]
    }
);

from vmstack.bootstrap.cli import main

exit(main())

from csv2po.cli import main

raise SystemExit(main())
